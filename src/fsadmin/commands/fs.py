"""Declarations of the ``fs`` command family.

Every command runs the filesystem shell class with its own name as the
leading parameter, so ``fsadmin fs chgrp -R developers /data`` becomes
``FileSystemShell chgrp -R developers /data``.
"""

from __future__ import annotations

from fsadmin.core.models import Arity, CommandDescriptor, FlagKind, FlagSpec, RuntimeTarget

FILE_SYSTEM_SHELL_CLASS = "alluxio.cli.fs.FileSystemShell"

GROUP = "fs"


def _recursive(action: str) -> FlagSpec:
    return FlagSpec("recursive", short="R", help=f"{action} recursively", token="-R")


def _bytes_flag(what: str) -> FlagSpec:
    return FlagSpec(
        "bytes",
        kind=FlagKind.STRING,
        help=f"number of bytes to read from the {what} of the file",
        token="-c",
        metavar="N",
    )


def fs_command(
    name: str,
    usage: str,
    arity: Arity,
    summary: str,
    *flags: FlagSpec,
    main_class: str = FILE_SYSTEM_SHELL_CLASS,
) -> CommandDescriptor:
    """Declare one filesystem shell command."""
    return CommandDescriptor(
        name=name,
        usage=usage,
        arity=arity,
        summary=summary,
        flags=flags,
        group=GROUP,
        target=RuntimeTarget(main_class=main_class, parameters=(name,)),
    )


def fs_commands(main_class: str = FILE_SYSTEM_SHELL_CLASS) -> tuple[CommandDescriptor, ...]:
    """Return the ``fs`` family in listing order."""
    one_path = Arity.exact(1)
    two_args = Arity.exact(2)
    return (
        fs_command(
            "cat", "<path>", one_path,
            "prints the content of a file to the console",
            main_class=main_class,
        ),
        fs_command(
            "checksum", "<path>", one_path,
            "calculates the md5 checksum of a file",
            main_class=main_class,
        ),
        fs_command(
            "chgrp", "<group> <path>", two_args,
            "changes the group of a file or directory specified by args",
            _recursive("change the group"),
            main_class=main_class,
        ),
        fs_command(
            "chmod", "<mode> <path>", two_args,
            "changes the permission of a file or directory specified by args",
            _recursive("change the permission"),
            main_class=main_class,
        ),
        fs_command(
            "chown", "<owner>[:<group>] <path>", two_args,
            "changes the owner of a file or directory specified by args",
            _recursive("change the owner"),
            main_class=main_class,
        ),
        fs_command(
            "cp", "<src> <dst>", two_args,
            "copies a file or directory within the filesystem",
            _recursive("copy"),
            FlagSpec(
                "buffer-size",
                kind=FlagKind.STRING,
                help="read buffer size in bytes",
                token="--buffersize",
                metavar="N",
            ),
            main_class=main_class,
        ),
        fs_command(
            "head", "<path>", one_path,
            "prints the leading bytes of a file",
            _bytes_flag("beginning"),
            main_class=main_class,
        ),
        fs_command(
            "location", "<path>", one_path,
            "displays the workers that hold the blocks of a file",
            main_class=main_class,
        ),
        fs_command(
            "ls", "<path>", one_path,
            "lists information about files and directories",
            _recursive("list subdirectories"),
            FlagSpec("force", short="f", help="force loading metadata from the under storage", token="-f"),
            FlagSpec(
                "sort",
                kind=FlagKind.STRING,
                help="sort by size, name, creationTime, or lastModificationTime",
                metavar="FIELD",
            ),
            main_class=main_class,
        ),
        fs_command(
            "mkdir", "<path> [<path> ...]", Arity.at_least(1),
            "creates directories, including missing parents",
            main_class=main_class,
        ),
        fs_command(
            "mv", "<src> <dst>", two_args,
            "renames a file or directory",
            main_class=main_class,
        ),
        fs_command(
            "rm", "<path>", one_path,
            "removes a file or directory",
            _recursive("remove directories"),
            FlagSpec("skip-ufs-check", short="U", help="skip the under storage consistency check", token="-U"),
            FlagSpec("alluxio-only", help="remove only the cached copy", token="--alluxioOnly"),
            main_class=main_class,
        ),
        fs_command(
            "stat", "<path>", one_path,
            "displays information about a file or directory",
            FlagSpec(
                "format",
                kind=FlagKind.STRING,
                help="format specifier for the output",
                token="-f",
                metavar="FMT",
            ),
            main_class=main_class,
        ),
        fs_command(
            "tail", "<path>", one_path,
            "prints the trailing bytes of a file",
            _bytes_flag("end"),
            main_class=main_class,
        ),
        fs_command(
            "test", "<path>", one_path,
            "tests properties of a path, reporting the result as the exit code",
            FlagSpec("directory", short="d", help="path is a directory", token="-d"),
            FlagSpec("exists", short="e", help="path exists", token="-e"),
            FlagSpec("file", short="f", help="path is a file", token="-f"),
            FlagSpec("not-empty", short="s", help="directory is not empty", token="-s"),
            FlagSpec("zero-length", short="z", help="file has zero length", token="-z"),
            main_class=main_class,
        ),
        fs_command(
            "touch", "<path>", one_path,
            "creates an empty file",
            main_class=main_class,
        ),
    )
