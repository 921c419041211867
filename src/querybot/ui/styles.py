"""CSS styles for the TUI.

Hides layout and styling decisions from the application logic.
"""

APP_CSS = """
Screen {
    layout: vertical;
    background: $background;
}

#chat-transcript {
    height: 1fr;
    border: round $primary 60%;
    border-title-color: $primary;
    border-title-style: bold;
    border-subtitle-color: $text-muted;
    padding: 0 1;
    scrollbar-gutter: stable;
}

.chat-message {
    height: auto;
    margin: 1 0 0 0;
    padding: 0 1;
}

.user-message {
    border-left: thick $primary;
    background: $primary 10%;
}

.assistant-message {
    border-left: thick $success;
    background: $success 10%;
}

.error-message {
    border-left: thick $error;
    background: $error 15%;
    color: $text-error;
}

.message-header {
    color: $text-muted;
    text-style: bold;
}

#thinking {
    height: auto;
    margin: 1 0 0 0;
    padding: 0 1;
    color: $text-muted;
    text-style: italic;
    display: none;

    &.-active {
        display: block;
    }
}

#status-panel {
    height: 1;
    padding: 0 1;
    color: $text-muted;
}

#chat-input-bar {
    height: auto;
    max-height: 8;
    padding: 0 1;
}

#input-column {
    width: 1fr;
    height: auto;
}

#chat-input {
    height: 5;
    border: tall $border;

    &:focus {
        border: tall $primary;
    }
}

#attachment-label {
    height: 1;
    color: $text-success;
}

#chat-input-bar Button {
    margin: 0 0 0 1;
    min-width: 8;
}

#voice-btn.-listening {
    background: $error;
    text-style: bold;
}
"""
