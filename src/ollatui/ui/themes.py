"""Theme definitions for the TUI.

This module hides the design decisions about:
- Color palettes and visual appearance
- Theme variables (borders, scrollbars, footer)

To add a new theme, define it here and register in the app.
"""

from textual.theme import Theme

# Dark terminal palette: yellow highlights on neutral greys
OLLATUI_DARK = Theme(
    name="ollatui-dark",
    primary="#e5c07b",      # Yellow - active tab, selection
    secondary="#61afef",    # Blue - user messages
    accent="#e5c07b",
    foreground="#d7dae0",
    background="#16181d",
    success="#98c379",
    warning="#d19a66",
    error="#e06c75",
    surface="#1e2127",
    panel="#1a1c22",
    dark=True,
    variables={
        # Border colors
        "border": "#3e4451",
        "border-blurred": "#2c313a",

        # Scrollbar styling
        "scrollbar": "#2c313a",
        "scrollbar-hover": "#3e4451",
        "scrollbar-active": "#e5c07b",
        "scrollbar-background": "#1a1c22",

        # Footer styling
        "footer-foreground": "#abb2bf",
        "footer-background": "#16181d",
        "footer-key-foreground": "#e5c07b",
        "footer-key-background": "#2c313a",

        # Text variants
        "text-muted": "#5c6370",
        "text-disabled": "#3e4451",
    },
)
