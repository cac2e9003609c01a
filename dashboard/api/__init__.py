"""HTTP роутеры: users, todos, goals, feedback, analytics"""
