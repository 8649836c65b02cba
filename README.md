# minish

A small interactive shell. It shows a `minishell$ ` prompt, reads a line, and runs it.

## What it understands

- Words, with `'single'` and `"double"` quotes. The quotes are removed from the word. An unclosed quote is an error and sets the status to 2.
- Variable expansion: `$NAME` and `$?`, which is the last exit status. Inside single quotes nothing is expanded. An unknown name expands to nothing.
- Pipelines: `cmd1 | cmd2 | cmd3`. The status of the line is that of the last stage.
- Redirections: `< file`, `> file`, `>> file`, and here-documents with `<< WORD`. Lines of a here-document have their variables expanded. A line that ends with an operator, or a redirection with no file name, is a syntax error.
- Builtins: `echo` (with `-n`), `cd` (no argument or `~` goes to `HOME`), `pwd`, `export` (with no argument lists every variable in sorted order as `declare -x`), `unset`, `env`, `exit` (with an optional numeric status).
- Other commands are looked up on `PATH`, or run directly when the name contains a `/`. A missing command gives status 127; one that cannot be executed, or is a directory, gives 126.

A builtin on its own runs inside the shell, so `cd`, `export`, `unset` and `exit` take effect. A builtin that is a stage of a pipeline runs on a copy of the shell's state and changes nothing.

## Keys

- Ctrl-C gives a fresh prompt line.
- Ctrl-\ is ignored by the shell; programs it starts get the default behaviour back.
- Ctrl-Z stops the program currently running, or prints a notice when there is none.
- Ctrl-D leaves the shell with the last exit status.

## Running it

Install the package, then start the shell:

```
minish
```

Example session:

```
minishell$ export GREETING=hello
minishell$ echo "$GREETING world" | cat > out.txt
minishell$ cat << EOF
> $GREETING
> EOF
hello
minishell$ exit 3
```

## Using it from Python

```python
from minish.shell import Shell

shell = Shell({"PATH": "/usr/bin:/bin", "HOME": "/tmp"})
status = shell.run_line("echo hi")
```

`Shell(environ)` starts from the given mapping, or from the process environment when none is given; an empty mapping gives a minimal environment holding only `OLDPWD` and `PWD`. `Shell.run_line` parses and runs one line, updates `shell.exit_code` and returns it; `exit` raises `minish.errors.ShellExit`, whose `code` is the status. `Shell.loop(reader)` calls `reader(prompt)` for each line until it returns `None` or a line runs `exit`, and returns the final status.

The parts can also be used on their own: `minish.parser.parse_line` turns a line into `minish.commands.Command` objects, and `minish.executor.execute` runs them.

## What it does not do

The shell only reads commands interactively (or from a reader function); it does not run script files and ignores its command-line arguments. There is no `;`, `&&`, `||`, no background jobs, no globbing and no command history beyond what the terminal's line editing offers.

## Tests

Install the `test` extra and run `pytest` from the project directory.