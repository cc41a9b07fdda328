"""Destroy every container a Garden server holds."""

import logging
import time

logger = logging.getLogger(__name__)

_ATTEMPTS = 3
_RETRY_PAUSE = 0.05
_GONE_MESSAGES = ("unknown handle", "container already being destroyed")


def cleanup_garden(garden_client, sleep=time.sleep):
    """Destroy all containers of ``garden_client`` and return the errors left over.

    ``garden_client`` provides ``containers()`` and ``destroy(handle)``; each
    container has a ``handle`` and may provide ``info()``. Each destroy is
    tried up to three times. A container that is unknown or already being
    destroyed counts as gone. Failures do not stop the cleanup; the error of
    the last attempt for each container that could not be destroyed is returned.
    """
    containers = list(garden_client.containers())
    logger.info("cleaning up %d Garden containers", len(containers))

    errors = []
    for container in containers:
        handle = container.handle
        try:
            container_path = getattr(container.info(), "container_path", "")
        except Exception:
            container_path = ""
        logger.info("cleaning up container %s (%s)", handle, container_path)

        for attempt in range(_ATTEMPTS):
            try:
                garden_client.destroy(handle)
            except Exception as error:
                if any(message in str(error) for message in _GONE_MESSAGES):
                    break
                if attempt == _ATTEMPTS - 1:
                    errors.append(error)
                else:
                    sleep(_RETRY_PAUSE)
            else:
                break
    return errors