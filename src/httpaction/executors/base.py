"""
base.py
-------
Defines the BaseExecutor interface for request executors.
"""
class BaseExecutor:
    def execute(self, spec, context: dict):
        """
        spec: the RequestSpec to issue
        context: includes the lifecycle phase ("query", "create", "update", "delete")
        Returns: a ResponseOutcome
        """
        raise NotImplementedError
