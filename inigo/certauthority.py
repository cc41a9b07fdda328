"""A throwaway certificate authority that writes keys and certificates to disk."""

import ipaddress
import os
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import NameOID


def _new_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=4096)


def _key_pem(key):
    return key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.TraditionalOpenSSL,
        serialization.NoEncryption(),
    )


def _name(common_name):
    return x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])


def _sign(subject, issuer, public_key, signing_key, *, ca, sans=()):
    now = datetime.now(timezone.utc)
    builder = (
        x509.CertificateBuilder()
        .subject_name(subject)
        .issuer_name(issuer)
        .public_key(public_key)
        .serial_number(x509.random_serial_number())
        .not_valid_before(now)
        .not_valid_after(now + timedelta(days=365))
        .add_extension(x509.BasicConstraints(ca=ca, path_length=None), critical=True)
    )
    if sans:
        builder = builder.add_extension(x509.SubjectAlternativeName(list(sans)), critical=False)
    return builder.sign(signing_key, hashes.SHA256())


def _cert_pem(cert):
    return cert.public_bytes(serialization.Encoding.PEM)


class CertAuthority:
    """A certificate authority whose key and certificate live in ``depot_dir``."""

    def __init__(self, depot_dir, common_name):
        self.depot_dir = Path(depot_dir)
        root_key = _new_key()
        root = _sign(_name(common_name), _name(common_name), root_key.public_key(), root_key, ca=True)
        key = _new_key()
        crt = _sign(_name(common_name), root.subject, key.public_key(), root_key, ca=True)

        key_path = self.depot_dir / f"{common_name}.key"
        key_path.write_bytes(_key_pem(key))
        crt_path = self.depot_dir / f"{common_name}.crt"
        crt_path.write_bytes(_cert_pem(crt))
        self._ca_key, self._ca_cert = str(key_path), str(crt_path)

    def ca_and_key(self):
        """Return the paths of the CA key and CA certificate, in that order."""
        return self._ca_key, self._ca_cert

    def generate_self_signed_cert_and_key(self, common_name, sans, intermediate_ca):
        """Issue a certificate for 127.0.0.1 and ``sans``; return (key path, cert path)."""
        ca_cert = x509.load_pem_x509_certificate(Path(self._ca_cert).read_bytes())
        ca_key = serialization.load_pem_private_key(Path(self._ca_key).read_bytes(), None)
        key = _new_key()
        alt_names = [x509.DNSName(name) for name in sans]
        alt_names.append(x509.IPAddress(ipaddress.ip_address("127.0.0.1")))
        crt = _sign(
            _name(common_name), ca_cert.subject, key.public_key(), ca_key,
            ca=bool(intermediate_ca), sans=alt_names,
        )
        return (
            self._write_temp(common_name, _key_pem(key)),
            self._write_temp(common_name, _cert_pem(crt)),
        )

    def _write_temp(self, prefix, data):
        fd, path = tempfile.mkstemp(dir=self.depot_dir, prefix=prefix)
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
        return path