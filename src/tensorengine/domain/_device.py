"""
Device placement descriptors.

A tensor's device decides whether its storage is natively addressable from
the host process. The dispatch engine only ever builds headers and iterators
over host memory; anything placed elsewhere is rejected up front with
`InaccessibleDataError`.

- `DeviceType`: enumeration of device categories
- `Device`: validated descriptor parsed from strings such as ``"cpu"`` or
  ``"cuda:0"``
"""

from enum import Enum
import re


class DeviceType(Enum):
    """
    Enumeration of supported device categories.

    Attributes
    ----------
    CPU : DeviceType
        Host memory, natively addressable.
    CUDA : DeviceType
        Accelerator memory, never addressable by this engine.
    """

    CPU = "cpu"
    CUDA = "cuda"


class Device:
    """
    Concrete device descriptor.

    Parameters
    ----------
    device : str
        ``"cpu"`` or ``"cuda:<index>"``.

    Raises
    ------
    ValueError
        If the string does not match a supported format.

    Notes
    -----
    Devices compare and hash by their canonical string, so ``Device("cpu")``
    instances are interchangeable.
    """

    __slots__ = ("type", "index")

    _CUDA_PATTERN = re.compile(r"^cuda:(\d+)$")

    def __init__(self, device: str):
        if device == "cpu":
            self.type = DeviceType.CPU
            self.index = None
        else:
            m = self._CUDA_PATTERN.match(device)
            if not m:
                raise ValueError(
                    f"Invalid device '{device}'. Expected 'cpu' or 'cuda:<index>'"
                )
            self.type = DeviceType.CUDA
            self.index = int(m.group(1))

    def __str__(self):
        return "cpu" if self.type is DeviceType.CPU else f"cuda:{self.index}"

    def __repr__(self):
        return f"Device({str(self)!r})"

    def __eq__(self, other):
        if not isinstance(other, Device):
            return NotImplemented
        return str(self) == str(other)

    def __hash__(self):
        return hash(str(self))

    def is_cpu(self) -> bool:
        return self.type is DeviceType.CPU

    def is_cuda(self) -> bool:
        return self.type is DeviceType.CUDA

    def is_natively_accessible(self) -> bool:
        """
        Check whether memory on this device can be addressed by the host.

        Returns
        -------
        bool
            True for CPU devices only.
        """
        return self.is_cpu()
