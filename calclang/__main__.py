from calclang.repl import main

main()
