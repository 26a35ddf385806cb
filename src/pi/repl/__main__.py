from pi.repl.cli import main

main()
