"""Built-in CLI sub-commands for strapi-cache.

* :mod:`~strapi_cache.commands.content` -- the five read operations
  (``collection``, ``count``, ``entry``, ``by-field``, ``single``).
* :mod:`~strapi_cache.commands.cache` -- inspect and clear the response
  cache.
* :mod:`~strapi_cache.commands.config` -- view and modify global settings.

Content commands are plain callbacks registered directly on the root
app; ``cache`` and ``config`` are :class:`typer.Typer` sub-applications.
"""
