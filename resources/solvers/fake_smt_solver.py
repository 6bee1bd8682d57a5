"""
A stand-in SMTLIB2 solver for exercising the process backend without a real
solver installed.  It understands one command per line:

- (get-info :version): answers with the version given as argv[1]
- (push 1) / (pop 1) / (assert ...): tracks assertions per scope
- (check-sat): unsat if (assert false) is in scope, else sat
- (get-value (t1 t2 ..)): answers over several lines
- (set-option :fake-crash true): complains on stderr and exits with 3
- (exit): exits with 0
"""
import sys

version = sys.argv[1] if len(sys.argv) > 1 else "4.8.15"
scopes = [[]]


def say(text):
    sys.stdout.write(text + "\n")
    sys.stdout.flush()


for line in sys.stdin:
    cmd = line.strip()
    if cmd == "(get-info :version)":
        say(f'(:version "{version}")')
    elif cmd == "(push 1)":
        scopes.append([])
    elif cmd == "(pop 1)":
        scopes.pop()
    elif cmd.startswith("(assert "):
        scopes[-1].append(cmd)
    elif cmd == "(check-sat)":
        failed = any("(assert false)" in s for s in scopes)
        say("unsat" if failed else "sat")
    elif cmd.startswith("(get-value ("):
        terms = cmd[len("(get-value (") : -2].split()
        pairs = [
            f"({t} {i})" if i % 2 == 0 else f"({t} (- {i}))"
            for i, t in enumerate(terms)
        ]
        say("(" + "\n ".join(pairs) + ")")
    elif cmd == "(set-option :fake-crash true)":
        sys.stderr.write("fake solver: crashing on request\n")
        sys.stderr.flush()
        sys.exit(3)
    elif cmd == "(exit)":
        sys.exit(0)
