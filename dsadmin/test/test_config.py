"""
Test cases for the dsadmin.config module.
"""

import os

from twisted.trial import unittest

from dsadmin import config
from dsadmin.tasks.schema import AddSchemaFileTask
from ldaptor.protocols.ldap import distinguishedname


def writeFile(path, content):
    with open(path, "wb") as f:
        f.write(content)


def resetConfig():
    config.loadConfig(configFiles=[], reload=True)


def loadConfigContent(testCase, content):
    """
    Load a configuration file holding C{content} as the global
    configuration, until the end of the test.
    """
    d = testCase.mktemp()
    os.mkdir(d)
    path = os.path.join(d, "test.cfg")
    writeFile(path, content)
    testCase.addCleanup(resetConfig)
    return config.loadConfig(configFiles=[path], reload=True)


class TestLoadConfig(unittest.TestCase):
    def testDefaults(self):
        """
        Without configuration files, the defaults are used.
        """
        cfg = loadConfigContent(self, b"")
        self.assertEqual(cfg.get("tasks", "base"), "cn=Scheduled Tasks,cn=tasks")
        self.assertFalse(cfg.getboolean("tasks", "decode-fallback"))

    def testMultipleConfigurationFiles(self):
        """
        Later files override earlier ones.
        """
        d = self.mktemp()
        os.mkdir(d)
        one = os.path.join(d, "one.cfg")
        two = os.path.join(d, "two.cfg")
        writeFile(one, b"[tasks]\nbase = cn=one\n")
        writeFile(two, b"[tasks]\nbase = cn=two\n")
        self.addCleanup(resetConfig)

        cfg = config.loadConfig(configFiles=[one, two], reload=True)
        self.assertEqual(cfg.get("tasks", "base"), "cn=two")


class TestTaskConfig(unittest.TestCase):
    def testExplicitBaseDN(self):
        cfg = config.TaskConfig(baseDN="cn=tasks,dc=example,dc=com")
        self.assertEqual(
            cfg.getScheduledTasksBaseDN(),
            distinguishedname.DistinguishedName("cn=tasks,dc=example,dc=com"),
        )

    def testBaseDNFromFile(self):
        loadConfigContent(self, b"[tasks]\nbase = cn=jobs,dc=example,dc=com\n")
        self.assertEqual(
            config.TaskConfig().getScheduledTasksBaseDN(),
            distinguishedname.DistinguishedName("cn=jobs,dc=example,dc=com"),
        )

    def testDecodeFallbackDefault(self):
        loadConfigContent(self, b"")
        self.assertFalse(config.TaskConfig().getDecodeFallback())

    def testDecodeFallbackFromFile(self):
        loadConfigContent(self, b"[tasks]\ndecode-fallback = yes\n")
        self.assertTrue(config.TaskConfig().getDecodeFallback())

    def testDecodeFallbackOverride(self):
        """
        An explicit setting wins over the configuration file.
        """
        loadConfigContent(self, b"[tasks]\ndecode-fallback = yes\n")
        self.assertFalse(config.TaskConfig(decodeFallback=False).getDecodeFallback())

    def testCopy(self):
        cfg = config.TaskConfig(baseDN="cn=tasks", decodeFallback=False)
        other = cfg.copy(decodeFallback=True)
        self.assertTrue(other.getDecodeFallback())
        self.assertEqual(
            other.getScheduledTasksBaseDN(),
            distinguishedname.DistinguishedName("cn=tasks"),
        )
        self.assertFalse(cfg.getDecodeFallback())

    def testDefaultTaskConfig(self):
        """
        The default configuration does not depend on the loaded files.
        """
        loadConfigContent(
            self, b"[tasks]\nbase = cn=elsewhere\ndecode-fallback = yes\n"
        )
        cfg = config.defaultTaskConfig()
        self.assertEqual(
            cfg.getScheduledTasksBaseDN(),
            distinguishedname.DistinguishedName("cn=Scheduled Tasks,cn=tasks"),
        )
        self.assertFalse(cfg.getDecodeFallback())


class TestTaskEntryBase(unittest.TestCase):
    def testFixedContainer(self):
        """
        Without a configuration, task entries go in the fixed container
        whatever the configuration files say.
        """
        loadConfigContent(self, b"[tasks]\nbase = cn=elsewhere\n")
        task = AddSchemaFileTask("foo", "bar")
        self.assertEqual(
            task.createTaskEntry().dn,
            distinguishedname.DistinguishedName(
                "ds-task-id=foo,cn=Scheduled Tasks,cn=tasks"
            ),
        )

    def testExplicitConfig(self):
        loadConfigContent(self, b"[tasks]\nbase = cn=elsewhere\n")
        task = AddSchemaFileTask("foo", "bar")
        self.assertEqual(
            task.createTaskEntry(config.TaskConfig()).dn,
            distinguishedname.DistinguishedName("ds-task-id=foo,cn=elsewhere"),
        )
