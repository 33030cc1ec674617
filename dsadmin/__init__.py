"""Administrative data model for LDAP directory servers, built on ldaptor"""
__version__ = "21.2.0"

__title__ = "dsadmin"
__description__ = "Task, control and access log model for LDAP directory servers"

__license__ = "MIT"
__author__ = "The ldaptor developers"
__copyright__ = "Copyright (c) 2002-2019 {}".format(__author__)
