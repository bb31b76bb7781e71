"""Score shapes per game variant.

A variant either records one required total per player, or a fixed,
ordered breakdown of optional components. An absent component stays
``None`` all the way to the database and back; it is never read as zero.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Mapping, NamedTuple, Optional, Sequence, Tuple

from scorebook.errors import ValidationError

# Signed 64-bit, the widest INTEGER the supported stores hold
SCORE_MIN = -2 ** 63
SCORE_MAX = 2 ** 63 - 1


class ScoreField(NamedTuple):
    name: str       # JSON key
    column: str     # scores table column
    required: bool
    form_key: str   # form/list key holding one value per player


@dataclass
class ScoreEntry:
    player_name: str
    values: Dict[str, Optional[int]] = field(default_factory=dict)


def _as_list(raw) -> Optional[list]:
    if raw is None:
        return None
    if isinstance(raw, (list, tuple)):
        return list(raw)
    text = str(raw).strip()
    if not text:
        return []
    return [part.strip() for part in text.split(',')]


class ScoreCodec:
    def __init__(self, fields: Sequence[ScoreField]):
        self.fields: Tuple[ScoreField, ...] = tuple(fields)

    def _coerce(self, score_field: ScoreField, raw) -> Optional[int]:
        if isinstance(raw, str):
            raw = raw.strip()
        if raw is None or raw == '':
            if score_field.required:
                raise ValidationError(f"Missing value for '{score_field.name}'")
            return None
        # bool is an int subclass; true/false is never a score
        if isinstance(raw, bool):
            raise ValidationError(f"Invalid value for '{score_field.name}': {raw!r}")
        if isinstance(raw, str):
            try:
                raw = int(raw)
            except ValueError:
                pass
        if isinstance(raw, int):
            if not SCORE_MIN <= raw <= SCORE_MAX:
                raise ValidationError(f"Value for '{score_field.name}' is out of range: {raw}")
            return raw
        raise ValidationError(f"Invalid value for '{score_field.name}': {raw!r}")

    def make_entry(self, player_name, raw_values: Mapping) -> ScoreEntry:
        name = player_name.strip() if isinstance(player_name, str) else ''
        if not name:
            raise ValidationError('Player name is required')
        # Keys outside the variant's fields (client-side ids, derived totals) are ignored
        values = {f.name: self._coerce(f, raw_values.get(f.name)) for f in self.fields}
        return ScoreEntry(player_name=name, values=values)

    def _checked(self, entries: List[ScoreEntry]) -> List[ScoreEntry]:
        if not entries:
            raise ValidationError('At least one player is required')
        seen = set()
        for entry in entries:
            if entry.player_name in seen:
                raise ValidationError(f"Player '{entry.player_name}' is listed more than once")
            seen.add(entry.player_name)
        return entries

    def _decode_columns(self, names, lookup: Callable[[str], Optional[list]]) -> List[ScoreEntry]:
        names = _as_list(names)
        if names is None:
            raise ValidationError("'playerNames' is required")
        columns = {}
        for score_field in self.fields:
            column = lookup(score_field.form_key)
            if column is None:
                if score_field.required:
                    raise ValidationError(f"'{score_field.form_key}' is required")
                continue
            if len(column) != len(names):
                raise ValidationError('Mismatched number of players and scores')
            columns[score_field.name] = column
        entries = [
            self.make_entry(name, {key: column[i] for key, column in columns.items()})
            for i, name in enumerate(names)
        ]
        return self._checked(entries)

    def decode_json(self, payload: Mapping) -> List[ScoreEntry]:
        """Decode ``{"scores": [{"player_name": ..., <fields>}]}`` or the
        parallel-list layout ``{"playerNames": [...], "playerScores": [...]}``."""
        if not isinstance(payload, Mapping):
            raise ValidationError('Invalid request payload')
        scores = payload.get('scores')
        if scores is None:
            return self._decode_columns(payload.get('playerNames'), lambda key: _as_list(payload.get(key)))
        if not isinstance(scores, list):
            raise ValidationError("'scores' must be a list")
        entries = []
        for item in scores:
            if not isinstance(item, Mapping):
                raise ValidationError('Each score must be an object')
            raw = dict(item)
            name = raw.pop('player_name', None)
            if name is None:
                name = raw.pop('name', None)
            entries.append(self.make_entry(name, raw))
        return self._checked(entries)

    def decode_form(self, form: Mapping) -> List[ScoreEntry]:
        return self._decode_columns(form.get('playerNames'), lambda key: _as_list(form.get(key)))

    def encode(self, entry: ScoreEntry) -> dict:
        encoded = {'player_name': entry.player_name}
        for score_field in self.fields:
            value = entry.values.get(score_field.name)
            if value is not None:
                encoded[score_field.name] = value
        return encoded


TOTAL_ONLY = ScoreCodec([
    ScoreField('score', 'total', True, 'playerScores'),
])

COMPONENT_BREAKDOWN = ScoreCodec([
    ScoreField(name, name, False, name)
    for name in (
        'legacy_score',
        'base_cards',
        'extra_vp',
        'basic_events',
        'special_events',
        'prosperity_cards',
        'visitors',
        'journey',
        'garland_award',
    )
])


class Variant(str, Enum):
    EVERDELL = 'everdell'
    ROOT = 'root'

    @property
    def codec(self) -> ScoreCodec:
        return _CODECS[self]

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


_CODECS = {
    Variant.EVERDELL: COMPONENT_BREAKDOWN,
    Variant.ROOT: TOTAL_ONLY,
}


def resolve_variants(names) -> Tuple[Variant, ...]:
    """Turn a comma-separated list (or iterable) of names into variants."""
    if isinstance(names, str):
        names = names.split(',')
    resolved = []
    for name in names:
        name = name.strip().lower()
        if not name:
            continue
        try:
            variant = Variant(name)
        except ValueError:
            raise ValueError(f"Unsupported game variant '{name}'") from None
        if variant not in resolved:
            resolved.append(variant)
    if not resolved:
        raise ValueError('At least one game variant must be supported')
    return tuple(resolved)
