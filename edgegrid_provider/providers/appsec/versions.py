"""
Resolution of the security configuration version an operation works on.

Reads address the latest version of a configuration. Writes need a version
that is not active on either network; when the latest version is active, a
new version is cloned from it first.
"""

from edgegrid_provider.client.appsec import (
    CreateConfigurationVersionCloneRequest,
    GetConfigurationRequest,
)


def _cache_key(config_id: int) -> str:
    return f"appsec:modifiable_version:{config_id}"


def latest_config_version(mapper, config_id: int) -> int:
    """Returns the latest version of a configuration with a side read."""
    configuration = mapper.call(
        mapper.context.appsec.get_configuration,
        GetConfigurationRequest(config_id=config_id),
    )
    return configuration.latest_version


def modifiable_config_version(mapper, config_id: int) -> int:
    """
    Returns a version of the configuration that accepts writes.

    The result is kept in the context cache so every write made through the
    same context lands on the same version, and at most one clone is created
    per configuration.
    """
    cache = mapper.context.cache
    key = _cache_key(config_id)
    if key in cache:
        return cache[key]

    configuration = mapper.call(
        mapper.context.appsec.get_configuration,
        GetConfigurationRequest(config_id=config_id),
    )
    version = configuration.latest_version
    if version in (configuration.staging_version, configuration.production_version):
        mapper.logger.debug(
            "version %s of configuration %s is active, cloning it", version, config_id
        )
        clone = mapper.call(
            mapper.context.appsec.create_configuration_version_clone,
            CreateConfigurationVersionCloneRequest(
                config_id=config_id, create_from_version=version
            ),
        )
        version = clone.version

    cache[key] = version
    return version
