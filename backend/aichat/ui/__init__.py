from .widgets import InputBox, PickItem, QuickPick, WidgetFactory

__all__ = ['InputBox', 'PickItem', 'QuickPick', 'WidgetFactory']
