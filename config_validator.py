import logging

from chart_data import CHART_KINDS
from chart_layout import LayoutOptions
from chart_scale import SCALE_POLICIES

logger = logging.getLogger('table_graphs.config')

CHART_KIND_AUTO = 'auto'


def _validate_choice(config_module, attr_name, choices, default):
    """Validate a setting that must be one of a fixed set of names."""
    value = getattr(config_module, attr_name, default)
    if value is None or str(value).strip() == '':
        return default

    value = str(value).strip().lower()
    if value not in choices:
        logger.warning(f"{attr_name} in config ('{value}') must be one of {', '.join(choices)}. Using default '{default}'.")
        return default
    return value


def _validate_positive_number(config_module, attr_name, default, allow_zero=False):
    """Validate a numeric pixel setting, falling back to the default when invalid."""
    raw_value = getattr(config_module, attr_name, default)
    if raw_value is None or str(raw_value).strip() == '':
        return default

    try:
        value = float(raw_value)
    except (ValueError, TypeError):
        logger.warning(f"Invalid {attr_name} in config ('{raw_value}'), using default.")
        return default

    if value < 0 or (value == 0 and not allow_zero):
        logger.warning(f"{attr_name} in config ('{raw_value}') must be positive. Using default.")
        return default
    return value


def resolve_chart_kind(config_module):
    """Return 'line', 'bar', or 'auto' when the kind should be inferred per table."""
    return _validate_choice(
        config_module, 'chart_kind', (CHART_KIND_AUTO,) + CHART_KINDS,
        config_module.DEFAULTS['chart_kind']
    )


def resolve_dpi(config_module):
    return int(_validate_positive_number(config_module, 'dpi', config_module.DEFAULTS['dpi']))


def build_layout_options(config_module, chart_kind=None):
    """
    Validate the chart configuration and build layout options from it.

    Args:
        config_module: The imported config module (or any object with the same attributes)
        chart_kind: Chart kind to use instead of the configured one

    Returns:
        LayoutOptions: Options for the layout engine. A configured kind of
        'auto' yields 'line'; callers that infer the kind pass it explicitly.
    """
    defaults = config_module.DEFAULTS

    if chart_kind is None:
        chart_kind = resolve_chart_kind(config_module)
        if chart_kind == CHART_KIND_AUTO:
            chart_kind = 'line'

    scale_policy = _validate_choice(config_module, 'scale_policy', SCALE_POLICIES, defaults['scale_policy'])

    options = LayoutOptions(
        chart_kind=chart_kind,
        scale_policy=scale_policy,
        chart_width=_validate_positive_number(config_module, 'chart_width', defaults['chart_width']),
        chart_height=_validate_positive_number(config_module, 'chart_height', defaults['chart_height']),
        margin=_validate_positive_number(config_module, 'margin', defaults['margin'], allow_zero=True),
        horizontal_step=_validate_positive_number(config_module, 'horizontal_step', defaults['horizontal_step']),
        bar_width=_validate_positive_number(config_module, 'bar_width', defaults['bar_width']),
    )

    logger.debug(f"Using chart options: {options}")
    return options
