from rich import print

from aligntree import Diagram, text_renderer

org = {
    "value": "[bold magenta]CEO[/bold magenta]",
    "children": [
        {"value": "[cyan]Engineering[/cyan]", "children": ["Platform", "Apps", "Data"]},
        {"value": "[cyan]Sales[/cyan]", "children": ["EMEA", "APAC"]},
    ],
}

print(Diagram.from_dict(org, box_style="square", connector_markup="dim"))
print()
print(Diagram.from_dict(org, text_renderer(), connector_style="straight", vertical_spacing=3))
print()
print(Diagram.from_dict(org, connector_policy="descendants", box_style="ascii"))
