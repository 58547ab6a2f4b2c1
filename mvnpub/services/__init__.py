"""Application services.

Services hold the publish logic and talk to the outside world only through
``mvnpub.platform`` (processes, files) and ``mvnpub.output`` (console).
"""
