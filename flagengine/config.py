"""
This submodule contains the :class:`Config` class for custom configuration of the feature client.

Note that the same class can also be imported from the ``flagengine.client`` submodule.
"""

import logging
from typing import Any, Optional

from flagengine.impl.bucketer import DEFAULT_BUCKET_SEPARATOR
from flagengine.impl.util import log


class Config:
    """Advanced configuration options for the feature client.

    To use these options, create an instance of ``Config`` and pass it to the
    :class:`flagengine.client.FeatureClient` constructor. Every option has a default, so most
    applications can use :func:`Config.default()`.
    """

    def __init__(
        self,
        bucket_separator: str = DEFAULT_BUCKET_SEPARATOR,
        simulation_users: int = 1000,
        defaults: Optional[dict] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        :param bucket_separator: The string placed between the user id and the group id to form
          the key that is hashed for rollouts. Changing it reshuffles every user's rollout bucket,
          so it should stay fixed for a deployed configuration.
        :param simulation_users: The number of synthetic users evaluated by
          :func:`flagengine.client.FeatureClient.simulate()` when the caller does not say.
        :param defaults: Fallback values, keyed by feature id, returned by
          :func:`flagengine.client.FeatureClient.value()` when a feature cannot be evaluated and the
          caller passed no default of its own.
        :param logger: The logger the client reports problems to. By default this is the
          ``flagengine.util`` logger.
        """
        if not isinstance(bucket_separator, str):
            raise ValueError('bucket_separator must be a string')
        if isinstance(simulation_users, bool) or not isinstance(simulation_users, int) or simulation_users < 1:
            raise ValueError('simulation_users must be a positive integer')

        self.__bucket_separator = bucket_separator
        self.__simulation_users = simulation_users
        self.__defaults = dict(defaults) if defaults else {}
        self.__logger = logger if logger is not None else log

    @classmethod
    def default(cls) -> 'Config':
        return Config()

    def copy_with_new_defaults(self, new_defaults: dict) -> 'Config':
        """Returns a new ``Config`` instance that is the same as this one, except for having different
        fallback values.

        :param new_defaults: the new fallback values, keyed by feature id
        """
        return Config(
            bucket_separator=self.__bucket_separator,
            simulation_users=self.__simulation_users,
            defaults=new_defaults,
            logger=self.__logger,
        )

    # for internal use only - probably should be part of the client logic
    def get_default(self, feature_id: str, default: Any) -> Any:
        if default is not None or feature_id not in self.__defaults:
            return default
        return self.__defaults[feature_id]

    @property
    def bucket_separator(self) -> str:
        return self.__bucket_separator

    @property
    def simulation_users(self) -> int:
        return self.__simulation_users

    @property
    def defaults(self) -> dict:
        return dict(self.__defaults)

    @property
    def logger(self) -> logging.Logger:
        return self.__logger


__all__ = ['Config']
