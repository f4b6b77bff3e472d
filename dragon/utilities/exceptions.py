class UnsupportedParameterException(ValueError):
    pass

class PreconditionViolationException(ValueError):
    pass

class IVNotSetException(PreconditionViolationException):
    pass

class WipedStateException(PreconditionViolationException):
    pass

class SBoxLoadException(ValueError):
    pass

class MissingSBoxesException(SBoxLoadException):
    pass
