import configparser
import os.path

from zope.interface import implementer

from dsadmin import interfaces
from ldaptor.protocols.ldap import distinguishedname


@implementer(interfaces.ITaskConfig)
class TaskConfig:
    baseDN = None
    decodeFallback = None

    def __init__(self, baseDN=None, decodeFallback=None):
        if baseDN is not None:
            baseDN = distinguishedname.DistinguishedName(baseDN)
            self.baseDN = baseDN
        if decodeFallback is not None:
            self.decodeFallback = bool(decodeFallback)

    def getScheduledTasksBaseDN(self):
        if self.baseDN is not None:
            return self.baseDN

        cfg = loadConfig()
        try:
            base = cfg.get("tasks", "base")
        except (configparser.NoOptionError, configparser.NoSectionError):
            base = DEFAULTS["tasks"]["base"]
        return distinguishedname.DistinguishedName(stringValue=base)

    def getDecodeFallback(self):
        if self.decodeFallback is not None:
            return self.decodeFallback

        cfg = loadConfig()
        try:
            return cfg.getboolean("tasks", "decode-fallback")
        except (configparser.NoOptionError, configparser.NoSectionError):
            return False

    def copy(self, **kw):
        if "baseDN" not in kw:
            kw["baseDN"] = self.baseDN
        if "decodeFallback" not in kw:
            kw["decodeFallback"] = self.decodeFallback
        r = self.__class__(**kw)
        return r


DEFAULTS = {
    "tasks": {
        "base": "cn=Scheduled Tasks,cn=tasks",
        "decode-fallback": "no",
    },
}

def defaultTaskConfig():
    """
    Get the configuration used when none is given: the fixed scheduled
    tasks container and no decode fallback. No file is read.
    """
    return TaskConfig(
        baseDN=DEFAULTS["tasks"]["base"],
        decodeFallback=False,
    )


CONFIG_FILES = [
    "/etc/dsadmin/global.cfg",
    os.path.expanduser("~/.dsadmin/global.cfg"),
]

__config = None


def loadConfig(configFiles=None, reload=False):
    """
    Load configuration file.
    """
    global __config
    if __config is None or reload:
        x = configparser.ConfigParser()

        for section, options in DEFAULTS.items():
            x.add_section(section)
            for option, value in options.items():
                x.set(section, option, value)

        if configFiles is None:
            configFiles = CONFIG_FILES
        x.read(configFiles)
        __config = x
    return __config
