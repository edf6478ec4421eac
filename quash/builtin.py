import os
import sys


def builtin_exit(args):
    """Terminate the shell immediately."""
    sys.exit(0)


def builtin_pwd(args):
    try:
        print(os.getcwd())
    except OSError as e:
        print(f"pwd: {e.strerror}", file=sys.stderr)


def builtin_cd(args):
    """Change directory, defaulting to $HOME"""
    if len(args) > 1:
        path = args[1]
    else:
        path = os.environ.get("HOME")
        if path is None:
            print("cd: HOME not set", file=sys.stderr)
            return
    try:
        os.chdir(path)
    except OSError as e:
        print(f"cd: {path}: {e.strerror}", file=sys.stderr)


def builtin_echo(args):
    print(" ".join(args[1:]))


def builtin_env(args):
    for key, value in os.environ.items():
        print(f"{key}={value}")


def builtin_setenv(args):
    if len(args) != 3:
        print("Usage: setenv <VARIABLE> <VALUE>", file=sys.stderr)
        return
    name, value = args[1], args[2]
    if not name or "=" in name:
        print(f"setenv: invalid variable name '{name}'", file=sys.stderr)
        return
    os.environ[name] = value


BUILTINS = {
    "exit": builtin_exit,
    "pwd": builtin_pwd,
    "cd": builtin_cd,
    "echo": builtin_echo,
    "env": builtin_env,
    "setenv": builtin_setenv,
}


def execute_builtin(args):
    """
    Execute built-in command if it matches.
    Returns True when the command was a built-in, whatever its outcome.
    """
    if not args:
        return False

    handler = BUILTINS.get(args[0])
    if handler is None:
        return False
    handler(args)
    sys.stdout.flush()
    return True
