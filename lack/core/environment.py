"""Scope chain for the lack language.

Scopes live in an arena and are addressed by integer handles; each frame stores its bindings and the handle of its
enclosing frame. Lookups and assignments walk outward through those links until a frame that defines the name is
found. They never raise: a missing name comes back as UNDEFINED (or False for assign) and the evaluator decides how to
report it.

Blocks nest strictly, so frames are pushed on block entry and popped on block exit, in LIFO order.
"""


class _Undefined:
    """Marker for a name that no scope in the chain defines. Distinct from nil, which is None."""

    def __repr__(self):
        return "UNDEFINED"


UNDEFINED = _Undefined()


class Environment:
    """Arena of scope frames. Handle GLOBAL is the process-wide global scope and is never popped."""
    GLOBAL = 0

    def __init__(self):
        self.frames = [{}]       # handle: {name: value}
        self.parents = [None]    # handle: enclosing handle

    def push(self, parent):
        """Creates a new, empty scope enclosed by parent and returns its handle."""
        self.frames.append({})
        self.parents.append(parent)
        return len(self.frames) - 1

    def pop(self, handle):
        """Discards scope handle, which must be the innermost one."""
        if handle != len(self.frames) - 1 or handle == Environment.GLOBAL:
            raise RuntimeError("scopes must be popped in LIFO order")
        self.frames.pop()
        self.parents.pop()

    def define(self, handle, name, value):
        """Binds name in scope handle itself, shadowing any outer binding. Redefinition overwrites."""
        self.frames[handle][name] = value

    def resolve(self, handle, name):
        """Returns the handle of the innermost scope at or outside handle that defines name, or None."""
        while handle is not None:
            if name in self.frames[handle]:
                return handle
            handle = self.parents[handle]
        return None

    def lookup(self, handle, name):
        """Returns the value bound to name as seen from scope handle, or UNDEFINED."""
        owner = self.resolve(handle, name)
        if owner is None:
            return UNDEFINED
        return self.frames[owner][name]

    def assign(self, handle, name, value):
        """Rebinds name in the nearest scope that defines it. Returns whether such a scope was found."""
        owner = self.resolve(handle, name)
        if owner is None:
            return False
        self.frames[owner][name] = value
        return True

    def depth(self):
        """Number of live scopes, the global one included."""
        return len(self.frames)

    def __repr__(self):
        return f"Environment({self.frames})"
