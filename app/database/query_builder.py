import re
from dataclasses import dataclass, field
from typing import Any

_NAMED_PARAM = re.compile(r":(\w+)")


@dataclass(frozen=True)
class DBQuery:
    """A named SQL statement template.

    ``query`` uses ``:param_name`` placeholders. The positional form asyncpg
    expects (``$1``, ``$2``, ...) is compiled once when the template is built,
    so binding only has to order the values.
    """

    id: str
    query: str
    _compiled: str = field(init=False, repr=False, compare=False)
    _param_names: tuple[str, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        compiled, names = _compile(self.query)
        object.__setattr__(self, "_compiled", compiled)
        object.__setattr__(self, "_param_names", names)

    @property
    def param_names(self) -> tuple[str, ...]:
        return self._param_names

    def bind(self, params: dict[str, Any]) -> tuple[str, list[Any]]:
        missing = [name for name in self._param_names if name not in params]
        if missing:
            raise ValueError(f"Missing parameter(s) for {self.id}: {', '.join(missing)}")
        return self._compiled, [params[name] for name in self._param_names]


def _compile(query: str) -> tuple[str, tuple[str, ...]]:
    names: list[str] = []
    for name in _NAMED_PARAM.findall(query):
        if name not in names:
            names.append(name)

    result_query = query
    for index, name in enumerate(names, start=1):
        # word boundary keeps :client_id from matching inside :client_id_hint
        result_query = re.sub(rf":{name}\b", f"${index}", result_query)

    return result_query, tuple(names)
