import logging.config

# An extra logging level below DEBUG, used for dumping complete wire trees
TRACE = logging.DEBUG - 5
LOG_LEVEL = "INFO"


def _init_logger(level=LOG_LEVEL):
    logging.getLogger().setLevel(level)

    def trace(self, message, *args, **kwargs):
        if self.isEnabledFor(TRACE):
            self._log(TRACE, message, args, **kwargs)

    level_name = "TRACE"
    logging.addLevelName(TRACE, level_name)
    setattr(logging, level_name, TRACE)
    setattr(logging.getLoggerClass(), level_name.lower(), trace)
