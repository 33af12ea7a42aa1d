from myshell.shell import main

main()
