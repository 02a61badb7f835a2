"""Registration of FileUtil command handlers on an externally provided event bus.

The event bus is any object with ``on(name, handler)`` and, for log forwarding,
``trigger(name, *args)``.
"""

from .core.fileutil import FileUtil


def on_plugin_load(eventbus, plugin_options=None, executor=None):
    """Create a :class:`FileUtil` and register all of its command handlers on ``eventbus``.

    Args:
        eventbus: Object exposing ``on(name, handler)``.
        plugin_options: Optional mapping of FileUtil options. Additionally understood keys:
            ``event_prepend`` (prefix of all command names, default ``'typhonjs'``) and
            ``log_event_name`` (informational messages are triggered on the bus under this name).
        executor: Optional executor used to finalize archives.

    Returns:
        The created FileUtil instance.
    """
    file_util = FileUtil(executor=executor)
    event_prepend = 'typhonjs'

    if plugin_options is not None:
        file_util.set_options(plugin_options)
        if isinstance(plugin_options.get('event_prepend'), str):
            event_prepend = plugin_options['event_prepend']
        log_event_name = plugin_options.get('log_event_name')
        if isinstance(log_event_name, str):
            file_util.set_options(
                {'log_event': lambda message: eventbus.trigger(log_event_name, message)}
            )

    for name, handler in file_util.command_handlers(event_prepend).items():
        eventbus.on(name, handler)

    return file_util
