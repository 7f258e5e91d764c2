import json
import logging
import sys
from argparse import ArgumentParser, FileType, Namespace

from bcmanager import __version__
from bcmanager.common.bcmanager_logging import set_logging_configuration, recompute_bcmanager_loggers
from bcmanager.common.exceptions import BCManagerError
from bcmanager.settings import ManagerSettings

logger = logging.getLogger('bcmanager.main')


def create_parser() -> ArgumentParser:
    parser = ArgumentParser(prog='bcmanager',
                            description='Business Central container telemetry and network failure diagnosis')
    parser.add_argument('--version', action='version', version=f'bcmanager {__version__}')
    parser.add_argument('--config', '-c', type=str, default=None, help='TOML settings file')
    parser.add_argument('--debug', action='store_true', default=False)

    subparsers = parser.add_subparsers(dest='command', required=True)

    stats_parser = subparsers.add_parser('stats', help='Print the normalized stats of containers')
    stats_parser.add_argument('containers', nargs='*', help='Container names, all running containers if omitted')

    diagnose_parser = subparsers.add_parser('diagnose', help='Diagnose the captured output of a failed deployment')
    diagnose_parser.add_argument('file', nargs='?', type=FileType('r'), default=sys.stdin,
                                 help='Output file, standard input if omitted')

    return parser


def load_settings(args: Namespace) -> ManagerSettings:
    if args.config:
        settings = ManagerSettings.from_toml(args.config)
    else:
        settings = ManagerSettings()

    if args.debug:
        settings.debug = True
    return settings


def configure_logging(settings: ManagerSettings):
    kwargs = {}
    if settings.logging_directory:
        kwargs['log_path'] = settings.logging_directory
    set_logging_configuration(debug=settings.debug,
                              log_level=settings.log_level_value,
                              disable_file_logging=settings.disable_file_logging,
                              **kwargs)
    recompute_bcmanager_loggers()


def run_stats(args: Namespace, settings: ManagerSettings) -> int:
    import docker.errors
    from bcmanager.orchestrator.docker import DockerStatsClient

    try:
        client = DockerStatsClient(settings)
    except docker.errors.DockerException as ex:
        logger.error(f'Cannot connect to the container engine: {ex}')
        return 1

    stats = client.collect_container_stats(args.containers or None)
    print(json.dumps({name: s.model_dump(by_alias=True) for name, s in stats.items()}, indent=2))
    return 0


def run_diagnose(args: Namespace, settings: ManagerSettings) -> int:
    from bcmanager.diagnostics.classifier import NetworkErrorClassifier

    classifier = NetworkErrorClassifier(port_range=settings.port_range,
                                        scripts=settings.remediation_scripts())
    diagnosis = classifier.classify(args.file.read().splitlines())

    print(diagnosis.model_dump_json(by_alias=True, indent=2) if diagnosis else 'null')
    return 0


def main(argv: list[str] | None = None) -> int:
    args = create_parser().parse_args(argv)
    settings = load_settings(args)
    configure_logging(settings)

    try:
        match args.command:
            case 'stats':
                return run_stats(args, settings)
            case 'diagnose':
                return run_diagnose(args, settings)
    except BCManagerError as ex:
        logger.error(str(ex))
        return 1
    return 2


if __name__ == '__main__':
    sys.exit(main())
