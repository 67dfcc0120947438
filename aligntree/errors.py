class DiagramError(Exception):
    pass


class ConfigurationError(DiagramError):
    pass


class LayoutOverflowError(DiagramError):
    pass


class TreeStructureError(DiagramError):
    pass


class RendererError(DiagramError):
    pass
