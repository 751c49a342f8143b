"""CSS styles for the TUI.

Hides layout and styling decisions from the application logic.

Layout, top to bottom:
- tab bar (one line)
- the active tab's pane: a main view plus a three-line input or summary box
- status bar
- optional log panel, docked at the bottom
"""

APP_CSS = """
Screen {
    layout: vertical;
    background: $background;
}

/* ============================================
   Tab Bar
   ============================================ */
#tab-bar {
    height: 1;
    padding: 0 1;
    background: $surface;
}

/* ============================================
   Panes
   ============================================ */
#panes {
    height: 1fr;
}

.pane {
    height: 100%;
}

.input-box {
    height: 3;
    border: round $border;
    border-title-color: $text-muted;
    padding: 0 1;

    &.-composing {
        border: round $primary;
        border-title-color: $primary;
    }
}

.main-view {
    height: 1fr;
    border: round $border;
    border-title-color: $primary;
    border-title-style: bold;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
}

/* ============================================
   Status Bar
   ============================================ */
#status-bar {
    height: 3;
    border: round $border;
    color: $text-muted;
    padding: 0 1;

    &.-error {
        border: round $error;
        color: $error;
    }

    &.-info {
        color: $foreground;
    }
}

/* ============================================
   Log Panel
   ============================================ */
#debug-panel {
    dock: bottom;
    height: 10;
    border: round $border;
    border-title-color: $warning;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    background: $panel;
    scrollbar-size-vertical: 1;
}
"""
