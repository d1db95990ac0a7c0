"""Project core for the native-windows-gui WYSIWYG designer."""
