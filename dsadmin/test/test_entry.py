"""
Test cases for dsadmin.entry
"""

import copy

from twisted.trial import unittest

from dsadmin import entry


class TestOrderedAttributeSet(unittest.TestCase):
    def testKeepsOrder(self):
        s = entry.OrderedAttributeSet("ds-task-dependency-id", ["c", "a", "b"])
        self.assertEqual(list(s), ["c", "a", "b"])

    def testDuplicates(self):
        s = entry.OrderedAttributeSet("foo", ["a", "b"])
        s.add("a")
        self.assertEqual(list(s), ["a", "b"])

    def testRemove(self):
        s = entry.OrderedAttributeSet("foo", ["a", "b", "c"])
        s.remove("b")
        s.discard("x")
        self.assertEqual(list(s), ["a", "c"])
        self.assertRaises(KeyError, s.remove, "b")

    def testEquality(self):
        """
        Order does not matter when comparing.
        """
        a = entry.OrderedAttributeSet("foo", ["a", "b"])
        b = entry.OrderedAttributeSet("foo", ["b", "a"])
        self.assertEqual(a, b)

    def testDeepCopy(self):
        a = entry.OrderedAttributeSet("foo", ["b", "a"])
        b = copy.deepcopy(a)
        b.add("c")
        self.assertEqual(list(a), ["b", "a"])
        self.assertEqual(list(b), ["b", "a", "c"])


class TestTaskEntry(unittest.TestCase):
    def setUp(self):
        self.e = entry.TaskEntry(
            "ds-task-id=foo,cn=Scheduled Tasks,cn=tasks",
            {
                "objectClass": ["top", "ds-task", "ds-task-rebuild"],
                "ds-task-rebuild-index": ["uid", "cn", "mail"],
                "ds-task-id": [b"foo"],
            },
        )

    def testValuesInOrder(self):
        self.assertEqual(
            entry.getAttributeValues(self.e, "ds-task-rebuild-index"),
            ["uid", "cn", "mail"],
        )

    def testCaseInsensitiveNames(self):
        self.assertEqual(
            entry.getAttributeValues(self.e, "DS-Task-Rebuild-Index"),
            ["uid", "cn", "mail"],
        )

    def testBytesValues(self):
        self.assertEqual(entry.getAttributeValue(self.e, "ds-task-id"), "foo")

    def testMissing(self):
        self.assertEqual(entry.getAttributeValues(self.e, "description"), [])
        self.assertEqual(entry.getAttributeValue(self.e, "description"), None)

    def testHasObjectClass(self):
        self.assertTrue(entry.hasObjectClass(self.e, "DS-TASK"))
        self.assertFalse(entry.hasObjectClass(self.e, "ds-task-backup"))
