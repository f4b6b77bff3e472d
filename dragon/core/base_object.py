class BaseObject(object):
    def __reprdir__(self):
        return list(self.__dict__)


    def __repr__(self):
        field_str = ', '.join([f'{k}={getattr(self, k)!r}' for k in self.__reprdir__()])
        return f'<{self.__class__.__name__}: {field_str}>'


    def __str__(self):
        return self.__repr__()


    def __eq__(self, other):
        return type(self) == type(other) and self.__dict__ == other.__dict__


    def __hash__(self):
        return object.__hash__(self)
