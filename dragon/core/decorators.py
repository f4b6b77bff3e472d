from dragon.utilities.runtime import RUNTIME


def register_primitive():
    def wrapper(cls):
        RUNTIME.register_primitive(cls)
        return cls

    return wrapper
