from __future__ import annotations


class NilType:
    __slots__ = ()
    type_name = "nil"

    def __repr__(self): return "nil"
    def __str__(self): return "nil"
    def __bool__(self): return False

    def __eq__(self, other):
        return isinstance(other, NilType)

    def __hash__(self):
        return hash(NilType)


NIL = NilType()
