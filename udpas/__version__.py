import os
from subprocess import check_output, CalledProcessError, DEVNULL

VERSION = "1.0.0"
try:
    GIT_VERSION = check_output(["git", "describe", "--tags", "--always"], stderr=DEVNULL,
                               cwd=os.path.dirname(os.path.abspath(__file__))).decode().strip().lstrip("v")
except (OSError, CalledProcessError):
    GIT_VERSION = VERSION
