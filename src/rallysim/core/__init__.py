LOGGER_NAME = "rallysim"
