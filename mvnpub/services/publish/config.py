from __future__ import annotations

# Server id that selects the central (Nexus staging) workflow
CENTRAL_SERVER_ID = "ossrh"
CENTRAL_NEXUS_URL = "https://oss.sonatype.org/"

# settings.xml server entry holding the signing passphrase
PASSPHRASE_SERVER_ID = "gpg.passphrase"

DEFAULT_BUNDLE_ROOT = "java/dist"

# Environment keys read by the resolver
ENV_SERVER_ID = "MAVEN_SERVER_ID"
ENV_USERNAME = "MAVEN_USERNAME"
ENV_PASSWORD = "MAVEN_PASSWORD"
ENV_STAGING_PROFILE_ID = "MAVEN_CENTRAL_STAGING_PROFILE_ID"
ENV_REPOSITORY_URL = "MAVEN_REPOSITORY_URL"
ENV_GPG_KEY = "MAVEN_GPG_KEY"
ENV_GPG_KEY_FILE = "MAVEN_GPG_KEY_FILE"
ENV_GPG_PASSPHRASE = "MAVEN_GPG_PASSPHRASE"
ENV_DRY_RUN = "DRY_RUN"
ENV_NEXUS_URL = "MAVEN_NEXUS_URL"
ENV_MVN = "MVN"
ENV_GPG = "GPG"
ENV_GPG_LOOPBACK = "MVNPUB_GPG_LOOPBACK"
ENV_KEEP_WORKDIR = "MVNPUB_KEEP_WORKDIR"

# Pinned plugin coordinates; the prefixes alone would resolve to whatever
# version the local repository happens to hold.
GPG_PLUGIN = "org.apache.maven.plugins:maven-gpg-plugin:3.2.7"
DEPLOY_PLUGIN = "org.apache.maven.plugins:maven-deploy-plugin:3.1.3"
NEXUS_STAGING_PLUGIN = "org.sonatype.plugins:nexus-staging-maven-plugin:1.7.0"

# Log files written into the work directory
DEPLOY_LOG = "deploy.log"
RELEASE_LOG = "release.log"
SETTINGS_FILE = "settings.xml"
