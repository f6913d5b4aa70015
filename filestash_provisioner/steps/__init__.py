from .step_10_check_privileges import CheckPrivilegesStep
from .step_20_install_dependencies import InstallDependenciesStep
from .step_30_build_native_lib import BuildNativeLibStep
from .step_40_install_toolchain import InstallToolchainStep
from .step_50_create_user import CreateUserStep
from .step_60_build_deploy import BuildDeployStep
from .step_70_register_service import RegisterServiceStep

__all__ = [
    "CheckPrivilegesStep",
    "InstallDependenciesStep",
    "BuildNativeLibStep",
    "InstallToolchainStep",
    "CreateUserStep",
    "BuildDeployStep",
    "RegisterServiceStep",
]
