# engine/exceptions.py

class AnalysisError(Exception):
    pass


class InvalidConfiguration(AnalysisError, ValueError):
    pass
