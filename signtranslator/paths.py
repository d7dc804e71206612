import sys
import os


def get_resource_path(relative_path):
    """
    Resolve a file under the resources folder to an absolute path.
    Works both from a source checkout and from a frozen (PyInstaller) build.

    Args:
        relative_path (str): path relative to resources/ (e.g. "config/translator_config.yml")

    Returns:
        str: absolute path of the resource
    """
    if os.path.isabs(relative_path):
        return relative_path

    if getattr(sys, 'frozen', False):
        # Frozen build: resources/ sits next to the executable
        base_path = os.path.dirname(sys.executable)
        resource_path = os.path.join(base_path, "resources", relative_path)
    else:
        # Source checkout: project_root/signtranslator/paths.py -> project_root/resources/
        current_dir = os.path.dirname(os.path.abspath(__file__))
        project_root = os.path.dirname(current_dir)
        resource_path = os.path.join(project_root, "resources", relative_path)

    return os.path.abspath(resource_path)
