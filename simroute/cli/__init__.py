from .common import (
    LOG_LEVELS,
    add_common_cli_arguments,
    install_exception_handlers,
    install_signal_handlers,
    positive_float,
)

__all__ = [
    "LOG_LEVELS",
    "add_common_cli_arguments",
    "install_exception_handlers",
    "install_signal_handlers",
    "positive_float",
]
