# examples/example_usage.py
import asyncio
import json

from pmcrypt import DEFAULT_KEY_DERIVATION_PARAMS, crypto_service_factory, derive_key_pbkdf2
from pmcrypt.debug_utils import configure_logging
from pmcrypt.models import EncryptedData


async def run(service):
    print(f"Using backend: {service.backend_name}")
    salt = service.generate_salt()
    key = await derive_key_pbkdf2(service, "correct horse battery staple", salt, DEFAULT_KEY_DERIVATION_PARAMS)
    print(f"Derived {len(key)}-byte key")

    vault = json.dumps({"entries": [{"site": "example.org", "user": "alice"}]}).encode("utf-8")
    enc = await service.encrypt(vault, key)
    record = json.dumps(enc.to_dict())
    print("Encrypted vault record OK")

    restored = EncryptedData.from_dict(json.loads(record))
    assert await service.decrypt(restored, key) == vault
    print("Decrypt OK")

    wrong = await derive_key_pbkdf2(service, "wrong password", salt, DEFAULT_KEY_DERIVATION_PARAMS)
    assert await service.decrypt(restored, wrong) is None
    print("Wrong password rejected")


def main():
    configure_logging()
    print("Starting test…")
    for env in ("node", "browser"):
        asyncio.run(run(crypto_service_factory.create_for_environment(env)))
    print("All operations OK, script finished.")


if __name__ == '__main__':
    main()
