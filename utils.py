# utils.py

import sys

input_file = None
log_file = None

def set_input_file(file_path):
    """Replay answers from file_path before asking on the terminal."""
    global input_file
    with open(file_path, 'r') as fin:
        input_file = fin.read().splitlines()

def set_log_file(file_path):
    global log_file
    log_file = open(file_path, 'w')

def close_log_file():
    global log_file
    if log_file:
        log_file.close()
        log_file = None

def reset_prompts():
    """Forget any replayed answers and close the answer log."""
    global input_file
    input_file = None
    close_log_file()

def _read_next_input_line():
    """Next non-comment line of the input file, or None once it is used up."""
    global input_file
    while input_file and input_file[0].startswith('#'):
        input_file.pop(0)
    if input_file:
        return input_file.pop(0).strip()
    return None

def prompt(question, default=None, display_default=None):
    """Ask a question, taking the answer from the input file first, then the terminal."""
    global log_file

    if display_default is None:
        display_default = default

    if display_default is not None and display_default != "":
        question = f"{question} [{display_default}]"

    answer = _read_next_input_line()
    if answer is not None:
        print(question, answer)
        if answer == "" and default is not None:
            answer = default
    else:
        while True:
            try:
                answer = input(question + " ").strip()
            except EOFError:
                print("\nInput interrupted. Exiting.")
                sys.exit(1)

            if answer:
                break
            elif default is not None:
                answer = default
                break
            else:
                print("Invalid input. Try again.")

    if log_file:
        log_file.write(f"# {question.strip()}\n{answer}\n")

    return answer

def prompt_int(question, default=None, display_default=None, minval=None, maxval=None):
    """Ask for an integer within optional limits, repeating until one is given."""
    while True:
        answer = prompt(question, default=str(default) if default is not None else None, display_default=display_default)
        try:
            value = int(answer)
        except ValueError:
            print("Please enter a valid integer.")
            continue
        if (minval is not None and value < minval) or (maxval is not None and value > maxval):
            print(f"Please enter an integer between {minval} and {maxval}.")
        else:
            return value

def prompt_float(question, default=None, display_default=None, minval=None, maxval=None):
    while True:
        answer = prompt(question, default=str(default) if default is not None else None, display_default=display_default)
        try:
            value = float(answer)
        except ValueError:
            print("Please enter a valid number.")
            continue
        if (minval is not None and value < minval) or (maxval is not None and value > maxval):
            print(f"Please enter a number between {minval} and {maxval}.")
        else:
            return value

def prompt_yn(question, default=False):
    display_default = "Yes" if default else "No"
    default_letter = "y" if default else "n"

    while True:
        answer = prompt(question, default=default_letter, display_default=display_default).strip().lower()
        if answer in ["y", "yes"]:
            return True
        elif answer in ["n", "no"]:
            return False
        else:
            print("Please answer with 'y' or 'n'.")

def prompt_choice(question, choices, default=None):
    choices_str = "/".join(choices)
    choices_lower = [c.lower() for c in choices]

    while True:
        answer = prompt(f"{question} ({choices_str})", default=default).strip().lower()
        if answer in choices_lower:
            return answer
        else:
            print(f"Please choose one of {choices_str}.")

def prompt_range(question, default=None):
    """Ask for a 'lower upper' pair with lower < upper."""
    display_default = f"{default[0]} {default[1]}" if default is not None else None
    while True:
        answer = prompt(question, default=display_default)
        try:
            lower, upper = (float(x) for x in answer.replace(',', ' ').split())
        except ValueError:
            print("Please enter two numbers: lower upper.")
            continue
        if upper <= lower:
            print("The upper bound must be larger than the lower bound.")
        else:
            return lower, upper

def prompt_axis_pair(question, ndim, default=None):
    """Ask for two distinct coordinate indices in [0, ndim)."""
    display_default = f"{default[0]} {default[1]}" if default is not None else None
    while True:
        answer = prompt(question, default=display_default)
        try:
            a, b = (int(x) for x in answer.replace(',', ' ').split())
        except ValueError:
            print("Please enter two coordinate indices.")
            continue
        if not (0 <= a < ndim and 0 <= b < ndim):
            print(f"Coordinate indices must be between 0 and {ndim - 1}.")
        elif a == b:
            print("Please choose two different coordinates.")
        else:
            return a, b
