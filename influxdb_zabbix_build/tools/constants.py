import enum
import platform
from typing import Optional


class Architecture(enum.Enum):
    I686 = "i686"
    ARMEL = "armel"
    X86_64 = "x86_64"

    @classmethod
    def from_machine(cls, machine: Optional[str] = None) -> 'Architecture':
        """
        Map the name of the machine hardware (as 'uname' reports it) to the architecture of the packages.
        Everything that is not recognized as 32-bit x86 or ARM is packaged as x86_64.
        """
        if machine is None:
            machine = platform.machine()

        machine = machine.lower()

        if machine in ("i386", "i486", "i586", "i686"):
            return cls.I686

        if machine.startswith("arm"):
            return cls.ARMEL

        return cls.X86_64

    @property
    def setarch_name(self) -> Optional[str]:
        """
        Personality that has to be set by the 'setarch' tool for the fpm's rpm build, if any.
        """
        if self == Architecture.I686:
            return "i686"
        return None


class PackageType(enum.Enum):
    DEB = "deb"
    RPM = "rpm"


# Map package-specific architecture names to the architecture names that are used in build.
PACKAGE_FILENAME_ARCHITECTURE_NAMES = {
    PackageType.RPM: {
        Architecture.I686: "i686",
        Architecture.ARMEL: "armel",
        Architecture.X86_64: "x86_64",
    },
    PackageType.DEB: {
        Architecture.I686: "i686",
        Architecture.ARMEL: "armel",
        Architecture.X86_64: "amd64",
    }
}
