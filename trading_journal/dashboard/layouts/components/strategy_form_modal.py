"""
Strategy Form Modal

Create/edit form for a strategy and its technical checklist, and the
archive confirmation that asks for a reason.
"""
import dash_mantine_components as dmc
from dash_iconify import DashIconify


def create_technical_row(index, technical=None):
    """One editable checklist row; index is the row's position in the form."""
    technical = technical or {}
    return dmc.Group(
        gap="xs",
        align="flex-end",
        wrap="nowrap",
        children=[
            dmc.TextInput(
                id={"type": "technical-indicator", "index": index},
                label="Indicator" if index == 0 else None,
                placeholder="RSI",
                value=technical.get('indicator') or '',
                size="xs",
                w=130
            ),
            dmc.TextInput(
                id={"type": "technical-timeframe", "index": index},
                label="Timeframe" if index == 0 else None,
                placeholder="H4",
                value=technical.get('timeframe') or '',
                size="xs",
                w=80
            ),
            dmc.TextInput(
                id={"type": "technical-condition", "index": index},
                label="Condition" if index == 0 else None,
                placeholder="Above 50",
                value=technical.get('condition') or '',
                size="xs",
                style={"flex": 1}
            ),
            dmc.Checkbox(
                id={"type": "technical-required", "index": index},
                label="Required",
                checked=technical.get('is_required', True),
                size="xs",
                mb=6
            ),
            dmc.ActionIcon(
                DashIconify(icon="mdi:close", width=14),
                id={"type": "remove-technical-btn", "index": index},
                variant="subtle",
                color="red",
                size="sm",
                mb=4
            ),
        ]
    )


def create_strategy_form_modal():
    """Create the strategy create/edit modal."""
    return dmc.Modal(
        id="strategy-form-modal",
        title="New Strategy",
        size="xl",
        centered=True,
        opened=False,
        overlayProps={"blur": 3},
        children=[
            dmc.Stack(
                gap="sm",
                children=[
                    dmc.Group(
                        grow=True,
                        children=[
                            dmc.TextInput(id="strategy-name", label="Name",
                                          placeholder="Support/Resistance Breakout", required=True),
                            dmc.TextInput(id="strategy-short-code", label="Short code",
                                          placeholder="BRK_H4"),
                        ]
                    ),
                    dmc.Textarea(id="strategy-setup", label="Setup", autosize=True, minRows=2,
                                 placeholder="Break and retest of a key level"),
                    dmc.Textarea(id="strategy-notes", label="Notes", autosize=True, minRows=2),

                    dmc.Divider(label="Technical conditions", labelPosition="left"),

                    dmc.Stack(id="technicals-container", gap="xs", children=[create_technical_row(0)]),

                    dmc.Group(
                        children=[
                            dmc.Button("Add condition", id="add-technical-btn", variant="light",
                                       size="xs", leftSection=DashIconify(icon="mdi:plus")),
                        ]
                    ),

                    dmc.Alert(
                        id="strategy-form-error",
                        title="Could not save strategy",
                        color="red",
                        icon=DashIconify(icon="mdi:alert"),
                        hide=True,
                        children=""
                    ),

                    dmc.Group(
                        justify="flex-end",
                        children=[
                            dmc.Button("Cancel", id="cancel-strategy-btn", variant="subtle", color="gray"),
                            dmc.Button("Save strategy", id="save-strategy-btn",
                                       leftSection=DashIconify(icon="mdi:content-save")),
                        ]
                    ),
                ]
            )
        ]
    )


def create_archive_strategy_modal():
    """Confirmation dialog shown before a strategy is archived."""
    return dmc.Modal(
        id="archive-strategy-modal",
        title="Archive Strategy",
        size="md",
        centered=True,
        opened=False,
        overlayProps={"blur": 3},
        children=[
            dmc.Stack(
                gap="md",
                children=[
                    dmc.Text(id="archive-strategy-text", size="sm", children=""),
                    dmc.TextInput(id="archive-reason", label="Reason",
                                  placeholder="Stopped working after the rate change"),
                    dmc.Group(
                        justify="flex-end",
                        children=[
                            dmc.Button("Cancel", id="cancel-archive-btn", variant="subtle", color="gray"),
                            dmc.Button("Archive", id="confirm-archive-btn", color="orange",
                                       leftSection=DashIconify(icon="mdi:archive-outline")),
                        ]
                    ),
                ]
            )
        ]
    )
