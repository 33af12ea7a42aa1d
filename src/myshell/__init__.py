"""myshell - a minimal interactive command shell."""
