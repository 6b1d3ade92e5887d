import json
from .helpers.log import check

_MISSING = object()


class Param:
    """Named scalar hyperparameters handed to a layer at construction."""

    def __init__(self, values=None, **kwargs):
        self.values = dict(values or {})
        self.values.update(kwargs)

    def get(self, key, default=_MISSING):
        """
        Look up `key`. Without a default, a missing key is a configuration
        error (CheckError).
        """
        if key in self.values:
            return self.values[key]
        check(default is not _MISSING, "Missing required parameter '%s'", key)
        return default

    def __contains__(self, key):
        return key in self.values

    def __repr__(self):
        return f"Param({self.values!r})"

    @classmethod
    def from_json(cls, path):
        with open(path) as f:
            values = json.load(f)
        check(isinstance(values, dict), "Parameter file '%s' must hold a JSON object", path)
        return cls(values)
