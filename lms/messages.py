"""Bundled message catalogs.

Each catalog maps a message id to a ``str.format`` template. Ids for operation
outcomes match :class:`lms.result.Status` values; the remaining ids are used by
the shell.
"""
from __future__ import annotations

import logging
from typing import Dict, Optional

from lms.config import settings
from lms.result import Status

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en"

CATALOGS: Dict[str, Dict[str, str]] = {
    "en": {
        # Accounts
        Status.REGISTERED: "{role} {name} successfully registered.",
        Status.LOGGED_IN: "{role} {name} successfully logged in.",
        Status.LOGGED_OUT: "Successfully logged out.",
        Status.INVALID_ROLE: 'Invalid role. Role must be "admin" or "user".',
        Status.INVALID_PARAMETERS: "Invalid parameters provided.",
        Status.INVALID_AMOUNT: "Amount must be positive.",
        Status.USER_ALREADY_EXISTS: "{role} {name} already exists.",
        Status.USER_NOT_FOUND: "User {name} does not exist.",
        Status.WRONG_PASSWORD: "Incorrect password.",
        Status.NO_ACTIVE_SESSION: "No user is currently logged in.",
        # Permissions
        Status.NOT_LOGGED_IN: "Please login first.",
        Status.ADMIN_REQUIRED: "Permission denied. Admin role required.",
        Status.USER_REQUIRED: "Permission denied. Only users can perform this action.",
        Status.NOT_OWN_PROFILE: "Permission denied. Can only view your own profile.",
        Status.UNKNOWN_ACTION: "Unknown {resource} action",
        Status.UNKNOWN_RESOURCE: "Unknown resource type",
        # Books
        Status.NO_BOOKS: "No books in the library.",
        Status.BOOK_LIST: "Book List:",
        Status.BOOK_FOUND: "{name} - {author} - Inventory: {inventory}",
        Status.BOOK_NOT_FOUND: 'Book "{name}" by {author} not found.',
        Status.BOOK_ADDED: 'Book "{name}" by {author} added successfully, inventory: {amount}.',
        Status.BOOK_UPDATED: 'Book "{name}" inventory successfully updated, new inventory: {inventory}.',
        Status.BOOK_DELETED: 'Book "{name}" by {author} successfully deleted.',
        Status.BOOK_CURRENTLY_BORROWED: 'Cannot delete book "{name}" because it is currently borrowed.',
        Status.OUT_OF_STOCK: 'Book "{name}" is not available for borrowing.',
        Status.ALREADY_BORROWED: 'You have already borrowed "{name}" by {author}.',
        Status.BOOK_BORROWED: 'Book "{name}" successfully borrowed.',
        Status.BOOK_RETURNED: 'Book "{name}" successfully returned.',
        Status.NOT_BORROWED: 'You have not borrowed "{name}" by {author}.',
        # Records
        Status.PROFILE: "Profile of {name}:",
        Status.USER_LIST: "User List:",
        Status.STATS: "System Statistics:",
        Status.CONFIG: "System Configuration:",
        # Shell
        "role_admin": "Admin",
        "role_user": "User",
        "welcome": "Welcome to Library Management System, please input your command (input exit to exit):",
        "goodbye": "See you next time!",
        "invalid_command": 'Invalid command. Type "help" for available commands.',
    },
    "zh": {
        Status.REGISTERED: "{role} {name} 注册成功。",
        Status.LOGGED_IN: "{role} {name} 登录成功。",
        Status.LOGGED_OUT: "已成功登出。",
        Status.INVALID_ROLE: '无效的角色，角色必须是 "admin" 或 "user"。',
        Status.INVALID_PARAMETERS: "提供的参数无效。",
        Status.INVALID_AMOUNT: "数量必须为正数。",
        Status.USER_ALREADY_EXISTS: "{role} {name} 已存在。",
        Status.USER_NOT_FOUND: "用户 {name} 不存在。",
        Status.WRONG_PASSWORD: "密码错误。",
        Status.NO_ACTIVE_SESSION: "当前没有用户登录。",
        Status.NOT_LOGGED_IN: "请先登录。",
        Status.ADMIN_REQUIRED: "权限不足，需要管理员角色。",
        Status.USER_REQUIRED: "权限不足，只有普通用户可以执行此操作。",
        Status.NOT_OWN_PROFILE: "权限不足，只能查看自己的信息。",
        Status.UNKNOWN_ACTION: "未知的 {resource} 操作",
        Status.UNKNOWN_RESOURCE: "未知的资源类型",
        Status.NO_BOOKS: "图书馆中没有图书。",
        Status.BOOK_LIST: "图书列表：",
        Status.BOOK_FOUND: "{name} - {author} - 库存: {inventory}",
        Status.BOOK_NOT_FOUND: "未找到 {author} 的图书《{name}》。",
        Status.BOOK_ADDED: "{author} 的图书《{name}》添加成功，库存: {amount}。",
        Status.BOOK_UPDATED: "图书《{name}》库存更新成功，新库存: {inventory}。",
        Status.BOOK_DELETED: "{author} 的图书《{name}》删除成功。",
        Status.BOOK_CURRENTLY_BORROWED: "图书《{name}》正在被借阅，无法删除。",
        Status.OUT_OF_STOCK: "图书《{name}》暂无可借库存。",
        Status.ALREADY_BORROWED: "您已经借阅了 {author} 的《{name}》。",
        Status.BOOK_BORROWED: "图书《{name}》借阅成功。",
        Status.BOOK_RETURNED: "图书《{name}》归还成功。",
        Status.NOT_BORROWED: "您没有借阅 {author} 的《{name}》。",
        Status.PROFILE: "{name} 的个人信息：",
        Status.USER_LIST: "用户列表：",
        Status.STATS: "系统统计：",
        Status.CONFIG: "系统配置：",
        "role_admin": "管理员",
        "role_user": "用户",
        "welcome": "欢迎使用图书管理系统，请输入命令（输入 exit 退出）：",
        "goodbye": "下次再见！",
        "invalid_command": '无效的命令，输入 "help" 查看可用命令。',
    },
}


class MessageCatalog:
    """Renders message templates for one language."""

    def __init__(self, language: Optional[str] = None) -> None:
        language = (language or settings.language or DEFAULT_LANGUAGE).lower().strip()
        if language not in CATALOGS:
            logger.warning(f"Unknown language '{language}', falling back to '{DEFAULT_LANGUAGE}'")
            language = DEFAULT_LANGUAGE
        self.language = language
        self._templates = CATALOGS[language]

    def get(self, key, **kwargs) -> str:
        template = self._templates.get(key)
        if template is None:
            template = CATALOGS[DEFAULT_LANGUAGE][key]
        return template.format(**kwargs) if kwargs else template

    def role_label(self, role) -> str:
        return self.get(f"role_{getattr(role, 'value', role)}")
