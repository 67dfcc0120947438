from rich import print

from aligntree import Diagram, TreeNode

sample = TreeNode("Root", [
    TreeNode("First Child With Some More Text"),
    TreeNode("Second"),
    TreeNode("Third"),
    TreeNode("A forth child", [
        TreeNode("Level 3 One"),
        TreeNode("Level 3 Two"),
        TreeNode("Level 3 Two"),
        TreeNode("Level 3 Two"),
    ]),
])

diagram = Diagram(sample, horizontal_spacing=2)
print(diagram)
