"""External per-repository actions (build, uninstall)."""

from .build_package import BuildPackageAction
from .command_runtime import CommandRunner, ShellCommandRunner
from .uninstall_package import UninstallPackageAction

__all__ = [
	"BuildPackageAction",
	"CommandRunner",
	"ShellCommandRunner",
	"UninstallPackageAction",
]
