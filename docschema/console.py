from colorama import Back, Fore, Style


def print_header(title: str, width: int = 60):
    title = f" {title} "
    padding = (width - len(title)) // 2
    print(f"\n{Back.BLUE}{Fore.WHITE}┌{'─' * width}┐{Style.RESET_ALL}")
    print(
        f"{Back.BLUE}{Fore.WHITE}│{' ' * padding}{title}{' ' * (width - len(title) - padding)}│{Style.RESET_ALL}"
    )
    print(f"{Back.BLUE}{Fore.WHITE}└{'─' * width}┘{Style.RESET_ALL}\n")


def unit_ok_print(path: str, count: int):
    print(f"{Fore.GREEN}  ✓{Style.RESET_ALL} {path} {Fore.YELLOW}{count}{Style.RESET_ALL} function(s)")


def unit_error_print(path: str, kind: str, error: str):
    print(f"{Fore.RED}  ✗{Style.RESET_ALL} {path} {Fore.RED}[{kind}] {error}{Style.RESET_ALL}")
