"""
Header Component

Navigation bar with the signed-in user and journal actions.
"""
from dash import html
import dash_mantine_components as dmc
from dash_iconify import DashIconify


def create_header():
    """Create the header/navbar component."""
    return dmc.Paper(
        p="md",
        radius="md",
        style={"backgroundColor": "#25262b"},
        children=[
            dmc.Group(
                justify="space-between",
                children=[
                    # Logo and title
                    dmc.Group(
                        children=[
                            DashIconify(
                                icon="mdi:notebook-edit-outline",
                                width=32,
                                color="#228be6"
                            ),
                            dmc.Title(
                                "Trading Journal",
                                order=2,
                                style={"color": "white", "margin": 0}
                            ),
                        ]
                    ),

                    # Controls
                    dmc.Group(
                        children=[
                            dmc.Button(
                                "Log Trade",
                                id="log-trade-btn",
                                leftSection=DashIconify(icon="mdi:plus"),
                                variant="filled",
                                color="blue"
                            ),

                            dmc.Button(
                                "Export CSV",
                                id="export-csv-btn",
                                leftSection=DashIconify(icon="mdi:file-delimited-outline"),
                                variant="outline",
                                color="gray"
                            ),

                            dmc.ActionIcon(
                                DashIconify(icon="mdi:refresh", width=20),
                                id="refresh-data-btn",
                                variant="subtle",
                                color="gray",
                                size="lg"
                            ),

                            html.A(
                                dmc.Button(
                                    "Sign out",
                                    leftSection=DashIconify(icon="mdi:logout"),
                                    variant="subtle",
                                    color="red"
                                ),
                                href="/logout"
                            ),
                        ]
                    ),
                ]
            ),

            dmc.Group(
                mt="xs",
                children=[
                    dmc.Badge(
                        id="user-badge",
                        children="Signed out",
                        color="gray",
                        variant="dot"
                    ),
                    dmc.Text(
                        id="last-update-text",
                        size="xs",
                        c="dimmed",
                        children="Last updated: --"
                    ),
                ]
            )
        ]
    )
