"""
Marshmallow Validation Schemas

Provides input validation for all API endpoints to ensure
data integrity before anything reaches the database.
"""
from datetime import timezone

from marshmallow import (
    Schema, fields, validate, validates, validates_schema, ValidationError,
    pre_load, post_load, EXCLUDE
)

USERNAME_PATTERN = r'^[a-zA-Z0-9._-]+$'

# Largest value a 64-bit INTEGER column holds
MAX_DB_INT = 2 ** 63 - 1


def to_naive_utc(value):
    """Convert an aware datetime to naive UTC; naive values are taken as UTC."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def blank_to_none(data, keys):
    """Treat empty strings as missing values for the given keys."""
    for key in keys:
        if isinstance(data.get(key), str) and data[key].strip() == '':
            data[key] = None
    return data


def format_validation_error(error):
    """
    Flatten a marshmallow ValidationError into one readable message.

    Example: {"direction": ["Must be one of: long, short."]}
        -> "direction: Must be one of: long, short."
    """
    messages = error.messages if isinstance(error, ValidationError) else error
    if isinstance(messages, (list, tuple)):
        return '; '.join(str(m) for m in messages)
    if not isinstance(messages, dict):
        return str(messages)

    parts = []
    for field, value in sorted(messages.items(), key=lambda item: str(item[0])):
        if isinstance(value, dict):
            value = format_validation_error(value)
        elif isinstance(value, (list, tuple)):
            value = str(value[0]) if value else ''
        label = 'request' if field == '_schema' else field
        parts.append(f'{label}: {value}')
    return '; '.join(parts)


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------

class LoginSchema(Schema):
    """Login with an email or username plus password."""

    class Meta:
        unknown = EXCLUDE

    identifier = fields.Str(load_default=None)
    email = fields.Str(load_default=None)
    username = fields.Str(load_default=None)
    password = fields.Str(required=True, validate=validate.Length(min=1))

    @post_load
    def resolve_identifier(self, data, **kwargs):
        identifier = data.get('identifier') or data.get('email') or data.get('username')
        if not identifier or not identifier.strip():
            raise ValidationError('Email or username is required', 'identifier')
        return {'identifier': identifier.strip(), 'password': data['password']}


class RegisterSchema(Schema):
    """New account registration."""

    class Meta:
        unknown = EXCLUDE

    email = fields.Email(required=True, validate=validate.Length(max=255))
    password = fields.Str(required=True, validate=validate.Length(min=6, max=128))
    username = fields.Str(
        load_default=None,
        allow_none=True,
        validate=[
            validate.Length(min=3, max=32,
                            error='Username must be between {min} and {max} characters long'),
            validate.Regexp(USERNAME_PATTERN,
                            error='Username can only contain letters, numbers, dots, underscores, or dashes')
        ]
    )

    @pre_load
    def strip_fields(self, data, **kwargs):
        data = dict(data)
        for key in ('email', 'username'):
            if isinstance(data.get(key), str):
                data[key] = data[key].strip()
        return blank_to_none(data, ['username'])

    @post_load
    def normalize_email(self, data, **kwargs):
        data['email'] = data['email'].lower()
        return data


# ---------------------------------------------------------------------------
# Trades
# ---------------------------------------------------------------------------

def check_trade_consistency(values, provided=None):
    """
    Enforce the exit-field rules on a (possibly merged) trade.

    Args:
        values: Trade field values after loading/merging
        provided: Keys present in the request; exit fields carried over from
            storage are not checked (they are cleared on reopen instead)

    Raises:
        ValidationError: If exit fields are set without an exit datetime,
            or the exit precedes the entry
    """
    exit_datetime = to_naive_utc(values.get('exit_datetime'))
    entry_datetime = to_naive_utc(values.get('entry_datetime'))
    exit_fields = ('exit_price', 'realized_pnl', 'r_multiple')

    if exit_datetime is None:
        offending = [
            key for key in exit_fields
            if values.get(key) is not None and (provided is None or key in provided)
        ]
        if offending:
            raise ValidationError({'exit_datetime': [
                'Exit price, realized PnL and R multiple require an exit datetime'
            ]})
    elif entry_datetime is not None and exit_datetime < entry_datetime:
        raise ValidationError({'exit_datetime': ['Exit datetime cannot be before entry datetime']})


class TradeSchema(Schema):
    """Schema for trade creation and updates."""

    class Meta:
        unknown = EXCLUDE

    OPTIONAL_KEYS = ('strategy_id', 'exit_datetime', 'exit_price', 'realized_pnl',
                     'r_multiple', 'platform')

    strategy_id = fields.Int(load_default=None, allow_none=True, strict=False,
                             validate=validate.Range(min=1, max=MAX_DB_INT))
    instrument = fields.Str(
        required=True,
        validate=validate.Length(min=1, max=50, error='Instrument is required')
    )
    direction = fields.Str(
        required=True,
        validate=validate.OneOf(['long', 'short'], error='Direction must be long or short')
    )
    entry_datetime = fields.DateTime(required=True)
    exit_datetime = fields.DateTime(load_default=None, allow_none=True)
    entry_price = fields.Float(required=True, allow_nan=False)
    exit_price = fields.Float(load_default=None, allow_none=True, allow_nan=False)
    position_size = fields.Float(required=True, allow_nan=False)
    realized_pnl = fields.Float(load_default=None, allow_none=True, allow_nan=False)
    r_multiple = fields.Float(load_default=None, allow_none=True, allow_nan=False)
    platform = fields.Str(load_default=None, allow_none=True)

    @pre_load
    def normalize(self, data, **kwargs):
        data = dict(data)
        if isinstance(data.get('instrument'), str):
            data['instrument'] = data['instrument'].strip().upper()
        if isinstance(data.get('direction'), str):
            data['direction'] = data['direction'].strip().lower()
        # A blank platform is rejected below, not silently dropped
        return blank_to_none(data, [k for k in self.OPTIONAL_KEYS if k != 'platform'])

    @validates('platform')
    def validate_platform(self, value, **kwargs):
        if value is None:
            return
        if not value.strip():
            raise ValidationError('Platform is invalid')
        if len(value.strip()) > 60:
            raise ValidationError('Platform must be shorter than 60 characters')

    @validates_schema
    def validate_exit_fields(self, data, partial=None, **kwargs):
        # Partial updates are checked after merging with the stored trade
        if partial:
            return
        check_trade_consistency(data)

    @post_load
    def finalize(self, data, **kwargs):
        for key in ('entry_datetime', 'exit_datetime'):
            if key in data:
                data[key] = to_naive_utc(data[key])
        if data.get('platform') is not None:
            data['platform'] = data['platform'].strip()
        return data


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

class TechnicalConditionSchema(Schema):
    """One checklist item on a strategy."""

    class Meta:
        unknown = EXCLUDE

    indicator = fields.Str(required=True, validate=validate.Length(min=1, max=100))
    timeframe = fields.Str(load_default=None, allow_none=True, validate=validate.Length(max=20))
    condition = fields.Str(required=True, validate=validate.Length(min=1))
    display_order = fields.Int(load_default=None, allow_none=True,
                               validate=validate.Range(min=0, max=MAX_DB_INT))
    is_required = fields.Bool(load_default=True)

    @pre_load
    def strip_text(self, data, **kwargs):
        data = dict(data)
        for key in ('indicator', 'timeframe', 'condition'):
            if isinstance(data.get(key), str):
                data[key] = data[key].strip()
        return blank_to_none(data, ['timeframe', 'display_order'])


class StrategySchema(Schema):
    """Schema for strategy creation and (partial) updates."""

    class Meta:
        unknown = EXCLUDE

    name = fields.Str(required=True, validate=validate.Length(min=1, max=100, error='Name is required'))
    short_code = fields.Str(load_default=None, allow_none=True, validate=validate.Length(max=20))
    setup_description = fields.Str(load_default=None, allow_none=True)
    notes = fields.Str(load_default=None, allow_none=True)
    is_active = fields.Bool(load_default=True)
    archived_reason = fields.Str(load_default=None, allow_none=True, validate=validate.Length(max=255))
    technicals = fields.List(fields.Nested(TechnicalConditionSchema), load_default=None, allow_none=True)

    @pre_load
    def strip_text(self, data, **kwargs):
        data = dict(data)
        for key in ('name', 'short_code', 'archived_reason'):
            if isinstance(data.get(key), str):
                data[key] = data[key].strip()
        return blank_to_none(data, ['short_code', 'setup_description', 'notes', 'archived_reason'])

    @post_load
    def order_technicals(self, data, **kwargs):
        technicals = data.get('technicals')
        if technicals:
            for position, technical in enumerate(technicals, start=1):
                if technical.get('display_order') is None:
                    technical['display_order'] = position
        return data


class TradeFilterSchema(Schema):
    """Query-string filters shared by trade listing, stats and export."""

    class Meta:
        unknown = EXCLUDE

    range = fields.Str(
        load_default='all',
        validate=validate.OneOf([
            'all', 'today', 'this-week', 'this-month', 'this-year', 'last-week',
            'last-month', 'last-year', 'last-7', 'last-30', 'custom'
        ])
    )
    date_from = fields.Date(data_key='from', load_default=None)
    date_to = fields.Date(data_key='to', load_default=None)
    status = fields.Str(load_default='all', validate=validate.OneOf(['all', 'open', 'closed']))
    search = fields.Str(load_default='')
    direction = fields.Str(load_default='all', validate=validate.OneOf(['all', 'long', 'short']))
    strategy_id = fields.Str(load_default=None)
    sort = fields.Str(
        load_default='entry-desc',
        validate=validate.OneOf(['entry-desc', 'entry-asc', 'pnl-desc', 'pnl-asc'])
    )

    @validates('strategy_id')
    def validate_strategy_id(self, value, **kwargs):
        if value is None or value == 'none':
            return
        if not (value.isascii() and value.isdigit()) or not 0 < int(value) <= MAX_DB_INT:
            raise ValidationError('strategy_id must be an integer or "none"')

    @validates_schema
    def validate_custom_range(self, data, **kwargs):
        if data.get('range') == 'custom' and not (data.get('date_from') or data.get('date_to')):
            raise ValidationError('Custom range requires "from" or "to"', 'from')

    @post_load
    def coerce_strategy(self, data, **kwargs):
        value = data.get('strategy_id')
        if value is not None and value != 'none':
            data['strategy_id'] = int(value)
        return data


class StrategyFilterSchema(Schema):
    """Query-string filters for strategy listing."""

    class Meta:
        unknown = EXCLUDE

    status = fields.Str(load_default='all', validate=validate.OneOf(['all', 'active', 'archived']))
    search = fields.Str(load_default='')
    sort = fields.Str(
        load_default='performance-desc',
        validate=validate.OneOf(['performance-desc', 'performance-asc', 'created-desc', 'created-asc'])
    )
    include_stats = fields.Bool(load_default=False)
