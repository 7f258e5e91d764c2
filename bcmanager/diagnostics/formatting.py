from bcmanager.diagnostics.data import ErrorType

_ERROR_TYPE_DESCRIPTIONS: dict[ErrorType, str] = {
    ErrorType.PORT_CONFLICT: 'Port Conflict',
    ErrorType.ENDPOINT_CREATION_FAILURE: 'HNS Endpoint Error',
    ErrorType.NAT_MAPPING_CONFLICT: 'NAT Mapping Conflict',
    ErrorType.SERVICE_FAILURE: 'Service Failure',
    ErrorType.UNKNOWN_NETWORK_FAILURE: 'Network Error',
}


def error_type_description(error_type: ErrorType | str) -> str:
    """ User facing name of a failure type """
    return _ERROR_TYPE_DESCRIPTIONS[ErrorType(error_type)]


def format_ports(ports: list[int] | tuple[int, ...] | None) -> str:
    if not ports:
        return 'Unknown ports'
    if len(ports) == 1:
        return f'Port {ports[0]}'
    return 'Ports ' + ', '.join(str(p) for p in ports)
