import argparse
import logging
import os
import sys

from burpcert.config import DEFAULT_CONFIG_PATH, load_config, resolve_host
from burpcert.errors import ConfigError
from burpcert.issuer import CertificateIssuer

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CONFIG = 2


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Generate a self-signed certificate and key for the Burp team server"
    )
    parser.add_argument('--host', default=None,
                        help="Comma-separated hostnames and IPs to generate a certificate for")
    parser.add_argument('--config', default=DEFAULT_CONFIG_PATH,
                        help="Path to the YAML configuration file")
    return parser.parse_args(argv)


def setup_logging(config):
    """Setup logging configuration"""
    log_config = config.get('logging', {})
    handlers = [logging.StreamHandler()]

    log_file = log_config.get('file')
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, str(log_config.get('level', 'INFO')).upper()),
        format=log_config.get('format', '%(asctime)s - %(name)s - %(levelname)s - %(message)s'),
        handlers=handlers
    )


def main(argv=None):
    """Main entry point for the certificate issuer"""
    args = parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(EXIT_CONFIG)

    setup_logging(config)

    result = CertificateIssuer(config).issue(resolve_host(config, args.host))

    if not result.ok:
        logging.error(f"Fatal error: {result.error}")
        sys.exit(EXIT_FAILED)

    if result.error is not None and not result.error.fatal:
        logging.warning(f"{result.cert_path} written but {result.error.path} was not: {result.error}")

    sys.exit(EXIT_OK)
