"""
uyamlt: locate the right UnityYAMLMerge across Unity Hub installs and run it.
"""

__version__ = "0.2.0"
__author__ = "uyamlt contributors"

from uyamlt.core.errors import TrampolineError
from uyamlt.core.installation import UnityInstallation
from uyamlt.core.selector import FallbackPolicy, Selection, SelectionRequest

__all__ = [
    "TrampolineError",
    "UnityInstallation",
    "FallbackPolicy",
    "Selection",
    "SelectionRequest",
]
