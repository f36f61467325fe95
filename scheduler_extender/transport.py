"""
Transport construction for extender clients.

Turns an ``ExtenderConfig``'s HTTPS flag and TLS material into an
``ssl.SSLContext`` and an ``httpx`` transport. When HTTPS is enabled without any
CA material the context skips server certificate verification; that fallback
is kept as-is and logged.
"""

import os
import ssl
import tempfile
from contextlib import contextmanager
from typing import Iterator, Optional, Tuple

import httpx

from .config import ExtenderConfig, TLSClientConfig
from .errors import ConfigError
from .logging import get_logger

logger = get_logger(__name__)


def resolve_tls_config(config: ExtenderConfig) -> TLSClientConfig:
    """Return the TLS settings the transport is built from."""
    tls = config.tls_config if config.tls_config is not None else TLSClientConfig()

    if config.enable_https and not tls.has_ca:
        logger.warning(
            "HTTPS enabled without CA material; server certificates will not be verified",
            url_prefix=config.url_prefix,
        )
        tls = tls.model_copy(update={"insecure": True})

    return tls


def build_tls_context(config: ExtenderConfig) -> Optional[ssl.SSLContext]:
    """Build the SSL context for an extender, or None when TLS is not configured.

    Raises:
        ConfigError: if the TLS material is inconsistent or cannot be loaded.
    """
    tls = resolve_tls_config(config)

    if not (tls.has_ca or tls.has_cert or tls.has_key or tls.insecure):
        return None

    if tls.insecure and tls.has_ca:
        raise ConfigError(
            "tls_config.ca_file",
            "specifying a root certificates file with the insecure flag is not allowed",
        )
    if tls.has_cert != tls.has_key:
        raise ConfigError(
            "tls_config.cert_file" if tls.has_key else "tls_config.key_file",
            "client certificate and key must be supplied together",
        )

    context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)

    try:
        if tls.ca_data:
            context.load_verify_locations(cadata=tls.ca_data)
        elif tls.ca_file:
            context.load_verify_locations(cafile=tls.ca_file)
        else:
            context.load_default_certs()
    except (OSError, ValueError) as e:
        raise ConfigError("tls_config.ca", str(e)) from e

    if tls.has_cert:
        try:
            with _cert_chain_files(tls) as (cert_path, key_path):
                context.load_cert_chain(certfile=cert_path, keyfile=key_path)
        except (OSError, ValueError) as e:
            raise ConfigError("tls_config.cert", str(e)) from e

    if tls.insecure:
        # check_hostname has to be cleared before verify_mode can drop to CERT_NONE
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE

    return context


def transport_for_context(context: Optional[ssl.SSLContext]) -> httpx.BaseTransport:
    """Return an httpx transport using ``context``, or the default transport."""
    if context is None:
        return httpx.HTTPTransport()
    return httpx.HTTPTransport(verify=context)


def make_transport(config: ExtenderConfig) -> httpx.BaseTransport:
    """Build the transport an extender client sends its requests through."""
    return transport_for_context(build_tls_context(config))


@contextmanager
def _cert_chain_files(tls: TLSClientConfig) -> Iterator[Tuple[str, str]]:
    """Yield file paths for the client certificate and key.

    ``ssl`` only loads certificate chains from files, so inline PEM data is
    written to a private temporary directory that is removed afterwards.
    """
    if not tls.cert_data and not tls.key_data:
        yield tls.cert_file, tls.key_file
        return

    with tempfile.TemporaryDirectory(prefix="extender-tls-") as tmpdir:
        cert_path = tls.cert_file
        key_path = tls.key_file
        if tls.cert_data:
            cert_path = _write_private(os.path.join(tmpdir, "client.crt"), tls.cert_data)
        if tls.key_data:
            key_path = _write_private(os.path.join(tmpdir, "client.key"), tls.key_data)
        yield cert_path, key_path


def _write_private(path: str, data: str) -> str:
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
    with os.fdopen(fd, "w") as f:
        f.write(data)
    return path
