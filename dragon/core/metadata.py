from enum import Enum


class SizeType(Enum):
    RANGE = 0


class EphemeralType(Enum):
    IV = 0


class SizeSpec(object):
    def __init__(self, size_type: SizeType, sizes: list):
        self.size_type = size_type
        self.sizes     = sizes


    def __repr__(self):
        return f'<SizeSpec: size_type={self.size_type}, sizes={self.sizes}>'


    def __contains__(self, size: int) -> bool:
        return size in self.sizes


class EphemeralSpec(object):
    def __init__(self, ephemeral_type: EphemeralType, size: SizeSpec):
        self.ephemeral_type = ephemeral_type
        self.size           = size


    def __repr__(self):
        return f'<EphemeralSpec: ephemeral_type={self.ephemeral_type}, size={self.size}>'
