class BCManagerError(Exception):
    """ Base class for the errors raised by bcmanager """
    ...


class StatsAcquisitionError(BCManagerError):
    def __init__(self, container: str, reason: str, original_exception: Exception = None):
        self.container = container
        self.reason = reason
        self.original_exception = original_exception
        super().__init__(f"Cannot read stats of container '{container}': {reason}")


class ContainerNotFoundError(StatsAcquisitionError):
    def __init__(self, container: str, original_exception: Exception = None):
        super().__init__(container, 'container not found', original_exception)


class ContainerListError(BCManagerError):
    def __init__(self, reason: str, original_exception: Exception = None):
        self.reason = reason
        self.original_exception = original_exception
        super().__init__(f"Cannot list containers: {reason}")
