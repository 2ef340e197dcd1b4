from typing import Optional

import environs

from ocppcore.shared.exceptions import InvalidSettingsValueError
from ocppcore.shared.messages.enums import SignaturePolicy


class SettingKey:
    MESSAGE_LOG_JSON = "MESSAGE_LOG_JSON"
    MESSAGE_LOG_XML = "MESSAGE_LOG_XML"
    SIGNATURE_POLICY = "SIGNATURE_POLICY"
    REQUEST_TIMEOUT = "REQUEST_TIMEOUT"


DEFAULT_SETTINGS = {
    SettingKey.MESSAGE_LOG_JSON: False,
    SettingKey.MESSAGE_LOG_XML: False,
    SettingKey.SIGNATURE_POLICY: SignaturePolicy.ALL,
    # Seconds
    SettingKey.REQUEST_TIMEOUT: 30.0,
}

# Usable without calling load_shared_settings() first
shared_settings = dict(DEFAULT_SETTINGS)


def load_shared_settings(env_path: Optional[str] = None):
    env = environs.Env(eager=False)
    env.read_env(path=env_path)  # read .env file, if it exists

    settings = {
        SettingKey.MESSAGE_LOG_JSON: env.bool("MESSAGE_LOG_JSON", default=False),
        SettingKey.MESSAGE_LOG_XML: env.bool("MESSAGE_LOG_XML", default=False),
        SettingKey.SIGNATURE_POLICY: env.str("SIGNATURE_POLICY", default="all"),
        SettingKey.REQUEST_TIMEOUT: env.float("REQUEST_TIMEOUT", default=30.0),
    }
    env.seal()  # raise all errors at once, if any

    try:
        settings[SettingKey.SIGNATURE_POLICY] = SignaturePolicy(
            settings[SettingKey.SIGNATURE_POLICY].strip().lower()
        )
    except ValueError as exc:
        raise InvalidSettingsValueError(
            "shared",
            SettingKey.SIGNATURE_POLICY,
            settings[SettingKey.SIGNATURE_POLICY],
        ) from exc

    if settings[SettingKey.REQUEST_TIMEOUT] <= 0:
        raise InvalidSettingsValueError(
            "shared",
            SettingKey.REQUEST_TIMEOUT,
            settings[SettingKey.REQUEST_TIMEOUT],
        )

    shared_settings.update(settings)
