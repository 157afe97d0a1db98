"""Lexical scope chain. Each Environment maps names to Values and may point to an enclosing (outer) Environment."""


class Environment:
    """One scope. The root scope is created per session; every function call gets a fresh scope enclosing the callee's
    captured scope. Closures hold a plain reference to their scope, so a scope lives as long as its longest holder.
    """

    def __init__(self, outer=None):
        self.store = {}
        self.outer = outer

    def get(self, name):
        """Returns the value bound to name in the nearest scope that has it, or None if no scope does."""
        env = self
        while env is not None:
            if name in env.store:
                return env.store[name]
            env = env.outer
        return None

    def set(self, name, value):
        """Binds name in this scope only. Outer bindings with the same name are shadowed, never updated."""
        self.store[name] = value
        return value

    def enclosed(self):
        """Returns a new child scope of this one."""
        return Environment(outer=self)

    def __contains__(self, name):
        return self.get(name) is not None

    def __repr__(self):
        return f"Environment({sorted(self.store)}, outer={self.outer is not None})"
