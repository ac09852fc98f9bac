"""Install Claude/Codex skills from a URL or a GitHub directory."""

from skill_installer.errors import SkillInstallError
from skill_installer.installer import SkillInstaller
from skill_installer.models import InstallResult

__version__ = "0.1.0"

__all__ = [
    "SkillInstallError",
    "SkillInstaller",
    "InstallResult",
    "__version__",
]
